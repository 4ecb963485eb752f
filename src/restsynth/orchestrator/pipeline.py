from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from restsynth.domain.loader import load_descriptors
from restsynth.domain.models import InterfaceDescriptor, SynthesisOptions
from restsynth.orchestrator.plan import PlannedInterface, build_output_plan
from restsynth.repo.scanner import scan_descriptor_files
from restsynth.synth.classify import classify_method
from restsynth.synth.errors import DescriptorError, SynthesisError
from restsynth.synth.shell import SynthesizedClient, synthesize_interface

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerateResult:
    descriptor_files: list[str]
    clients: list[SynthesizedClient]
    modules: dict[str, str]          # rel_path -> source
    out_dir: Optional[str] = None
    written: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ParameterRow:
    interface: str
    method: str
    verb: str
    path: str
    parameter: str
    role: str
    shape: str


def _load_all(
    path: Path,
    max_files: int | None,
    exclude_dirs: Iterable[str] = (),
) -> tuple[list[str], list[tuple[str, InterfaceDescriptor]]]:
    files = scan_descriptor_files(path, max_files=max_files, exclude_dirs=exclude_dirs)
    loaded: list[tuple[str, InterfaceDescriptor]] = []
    for f in files:
        descriptors = load_descriptors(Path(f))
        seen: set[str] = set()
        for d in descriptors:
            if d.name in seen:
                raise DescriptorError(f"interface {d.name!r} is declared more than once", path=f)
            seen.add(d.name)
        logger.debug("loaded %d interface(s) from %s", len(descriptors), f)
        loaded.extend((f, d) for d in descriptors)
    return files, loaded


def run_generate(
    path: Path,
    out_dir: Optional[Path] = None,
    options: Optional[SynthesisOptions] = None,
    max_files: int | None = None,
    exclude_dirs: Iterable[str] = (),
) -> GenerateResult:
    """
    Load every descriptor under ``path``, synthesize each interface and,
    when ``out_dir`` is given, write one module per interface.

    All interfaces are synthesized before anything is written, so a failing
    interface leaves the output directory untouched.
    """
    options = options or SynthesisOptions()
    files, loaded = _load_all(path.resolve(), max_files, exclude_dirs)

    by_key: dict[tuple[str, str], SynthesizedClient] = {}
    for source, descriptor in loaded:
        try:
            client = synthesize_interface(descriptor, options)
        except SynthesisError as exc:
            logger.error("synthesis aborted for %s (%s): %s", descriptor.name, source, exc.message)
            raise
        by_key[(source, descriptor.name)] = client

    plan = build_output_plan(
        [PlannedInterface(source=s, interface_name=d.name) for s, d in loaded],
        class_suffix=options.class_suffix,
        out_root=str(out_dir) if out_dir else "generated",
    )

    modules: dict[str, str] = {}
    clients: list[SynthesizedClient] = []
    for m in plan.modules:
        client = by_key[(m.interface.source, m.interface.interface_name)]
        clients.append(client)
        modules[m.rel_path] = client.render()

    written: list[str] = []
    if out_dir is not None:
        out_dir.mkdir(parents=True, exist_ok=True)
        for rel_path, source in modules.items():
            target = out_dir / rel_path
            target.write_text(source, encoding="utf-8")
            written.append(str(target))
            logger.info("wrote %s", target)

    return GenerateResult(
        descriptor_files=files,
        clients=clients,
        modules=modules,
        out_dir=str(out_dir) if out_dir else None,
        written=written,
    )


def inspect_descriptors(
    path: Path,
    max_files: int | None = None,
    exclude_dirs: Iterable[str] = (),
) -> list[ParameterRow]:
    """Classification of every parameter, without synthesizing anything."""
    _, loaded = _load_all(path.resolve(), max_files, exclude_dirs)
    rows: list[ParameterRow] = []
    for _, descriptor in loaded:
        for method in descriptor.methods:
            try:
                params = classify_method(method)
            except SynthesisError as exc:
                raise exc.with_interface(descriptor.name) from exc
            for c in params.classified:
                rows.append(
                    ParameterRow(
                        interface=descriptor.name,
                        method=method.name,
                        verb=method.verb.upper(),
                        path=method.path,
                        parameter=c.name,
                        role=c.role,
                        shape=c.shape or "-",
                    )
                )
    return rows
