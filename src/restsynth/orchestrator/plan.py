from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

from restsynth.synth.naming import snake_case


@dataclass(frozen=True)
class PlannedInterface:
    source: str            # descriptor file the interface came from
    interface_name: str


@dataclass(frozen=True)
class ModulePlan:
    rel_path: str          # e.g. orders_connector.py
    interface: PlannedInterface


@dataclass(frozen=True)
class OutputPlan:
    out_root: str
    modules: Tuple[ModulePlan, ...]


def _sha1_short(text: str, n: int = 6) -> str:
    return hashlib.sha1(text.encode("utf-8")).hexdigest()[:n]


def module_filename(interface_name: str, class_suffix: str) -> str:
    # Orders + Connector -> orders_connector.py
    stem = snake_case(interface_name) or "client"
    suffix = snake_case(class_suffix)
    return f"{stem}_{suffix}.py" if suffix else f"{stem}.py"


def build_output_plan(
    interfaces: Iterable[PlannedInterface],
    class_suffix: str,
    out_root: str = "generated",
) -> OutputPlan:
    """
    One module per interface, ordered by (filename, source, interface).
    No IO; deterministic by construction.
    """
    ordered = sorted(
        interfaces,
        key=lambda i: (module_filename(i.interface_name, class_suffix), i.source, i.interface_name),
    )

    used: Dict[str, PlannedInterface] = {}
    modules: List[ModulePlan] = []
    for item in ordered:
        filename = module_filename(item.interface_name, class_suffix)

        # collision-safe filenames (same interface name in two descriptors)
        if filename in used and used[filename] != item:
            stem = filename[:-3]
            filename = f"{stem}__{_sha1_short(item.source + ':' + item.interface_name)}.py"
        used[filename] = item

        modules.append(ModulePlan(rel_path=filename, interface=item))

    return OutputPlan(out_root=out_root, modules=tuple(modules))
