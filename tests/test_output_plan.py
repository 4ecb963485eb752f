from restsynth.orchestrator.plan import PlannedInterface, build_output_plan, module_filename


def test_build_output_plan_names_one_module_per_interface():
    plan = build_output_plan(
        [
            PlannedInterface(source="api/orders.json", interface_name="Orders"),
            PlannedInterface(source="api/orders.json", interface_name="OrderLines"),
        ],
        class_suffix="Connector",
        out_root="generated",
    )

    assert plan.out_root == "generated"
    assert [m.rel_path for m in plan.modules] == [
        "order_lines_connector.py",
        "orders_connector.py",
    ]


def test_build_output_plan_is_collision_safe():
    plan = build_output_plan(
        [
            PlannedInterface(source="b.json", interface_name="Orders"),
            PlannedInterface(source="a.json", interface_name="Orders"),
        ],
        class_suffix="Connector",
    )

    names = [m.rel_path for m in plan.modules]
    assert names[0] == "orders_connector.py"
    assert plan.modules[0].interface.source == "a.json"
    assert names[1].startswith("orders_connector__") and names[1].endswith(".py")
    assert len(set(names)) == 2


def test_module_filename_without_suffix():
    assert module_filename("Orders", "") == "orders.py"
