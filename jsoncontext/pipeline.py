"""Driver pipeline: sample, infer, name, build and emit for configured inputs."""

from __future__ import annotations

import types
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from .config import DriverConfig
from .discovery import expand_input
from .emitter import DEFAULT_CONTAINER, DEFAULT_NAMESPACE, RESERVED_NAMES, CodeEmitter, EmittedCode
from .graph import build_type_graph
from .loader import compile_module
from .logging import get_logger
from .models import GeneratedClass, InputSource, SourceFailure, TypeGraph
from .naming import to_identifier
from .sampler import SourceReadError, sample_records
from .shapes import describe, infer_record_shape

logger = get_logger("pipeline")

Compiler = Callable[[str, str], types.ModuleType]


@dataclass
class GenerationResult:
    """Emitted code plus the graph it came from and the per-source failures."""

    code: EmittedCode
    graph: TypeGraph
    failures: List[SourceFailure]

    @property
    def source(self) -> str:
        return self.code.source


@dataclass(frozen=True)
class _Job:
    index: int
    path: str
    sample_count: int


def class_name_for(path: str) -> str:
    return to_identifier(Path(path).stem)


def build_candidate(path: str, sample_count: int, source_index: int = 0) -> GeneratedClass:
    """Sample and infer a single file, turning any failure into data."""
    class_name = class_name_for(path)
    try:
        records = sample_records(path, sample_count)
        shape = infer_record_shape(records)
    except Exception as exc:
        logger.warning("Skipping %s: %s", path, exc)
        return GeneratedClass(
            class_name=class_name,
            data_file_path=path,
            success=False,
            error=exc,
            source_index=source_index,
        )
    logger.debug("Inferred %s from %s: %s", class_name, path, describe(shape))
    return GeneratedClass(
        class_name=class_name,
        data_file_path=path,
        shape=shape,
        source_index=source_index,
    )


def collect_candidates(
    inputs: Iterable[InputSource], *, max_workers: int = 1
) -> List[GeneratedClass]:
    """Expand every input and build one candidate per concrete file.

    Expansion failures become failed candidates for the input path itself.
    Per-file work may run on a thread pool; the result keeps declaration order.
    """
    jobs: List[_Job] = []
    failed: List[GeneratedClass] = []
    index = 0
    for source in inputs:
        try:
            paths = expand_input(source)
        except (SourceReadError, OSError) as exc:
            logger.warning("Could not expand %s: %s", source.path, exc)
            failed.append(
                GeneratedClass(
                    class_name=class_name_for(source.path),
                    data_file_path=source.path,
                    success=False,
                    error=exc,
                    source_index=index,
                )
            )
            index += 1
            continue
        if not paths:
            logger.info("No files matched %s in %s", source.mask, source.path)
        for path in paths:
            jobs.append(_Job(index=index, path=path, sample_count=source.sample_count))
            index += 1

    def _run(job: _Job) -> GeneratedClass:
        return build_candidate(job.path, job.sample_count, job.index)

    if max_workers > 1 and len(jobs) > 1:
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="jsoncontext") as pool:
            candidates = list(pool.map(_run, jobs))
    else:
        candidates = [_run(job) for job in jobs]

    return sorted(candidates + failed, key=lambda item: item.source_index)


def infer(
    inputs: Iterable[InputSource],
    *,
    container: str = DEFAULT_CONTAINER,
    max_workers: int = 1,
) -> Tuple[TypeGraph, List[SourceFailure]]:
    """Build the type graph for ``inputs`` and report the sources that failed."""
    candidates = collect_candidates(inputs, max_workers=max_workers)
    graph = build_type_graph(candidates, reserved=(container, *sorted(RESERVED_NAMES)))
    failures = [
        SourceFailure(path=item.data_file_path, error=_error_of(item)) for item in graph.failures
    ]
    logger.info(
        "Inferred %d class(es); %d source(s) failed", len(graph.classes), len(failures)
    )
    return graph, failures


def generate(
    inputs: Iterable[InputSource],
    namespace: str = DEFAULT_NAMESPACE,
    container: str = DEFAULT_CONTAINER,
    *,
    max_workers: int = 1,
    emitter: Optional[CodeEmitter] = None,
) -> GenerationResult:
    """Run inference and emission; failed sources never block the rest."""
    graph, failures = infer(inputs, container=container, max_workers=max_workers)
    code = (emitter or CodeEmitter()).emit(graph, namespace=namespace, container=container)
    return GenerationResult(code=code, graph=graph, failures=failures)


def format_failure_report(failures: Sequence[SourceFailure]) -> str:
    """Human-readable summary of failed sources, empty when nothing failed."""
    if not failures:
        return ""
    lines = [f"Couldn't process {len(failures)} files:"]
    lines.extend(f"{failure.path} - {failure.message}" for failure in failures)
    return "\n".join(lines)


class JsonContextDriver:
    """Host-facing adapter that generates, compiles and instantiates a data context."""

    def __init__(
        self,
        config: DriverConfig,
        *,
        compiler: Compiler = compile_module,
        emitter: Optional[CodeEmitter] = None,
    ) -> None:
        self.config = config
        self.compiler = compiler
        self.emitter = emitter or CodeEmitter()
        self.logger = get_logger("driver")

    def generate(self) -> GenerationResult:
        self.logger.info(
            "Generating %s.%s from %d input(s)",
            self.config.namespace,
            self.config.container,
            len(self.config.inputs),
        )
        return generate(
            self.config.inputs,
            self.config.namespace,
            self.config.container,
            max_workers=self.config.max_workers,
            emitter=self.emitter,
        )

    def load(self) -> Tuple[object, GenerationResult]:
        """Compile the emitted module and return a container instance with the result."""
        result = self.generate()
        module = self.compiler(result.source, self.config.namespace)
        container_type = getattr(module, self.config.container)
        return container_type(), result


def _error_of(item: GeneratedClass) -> BaseException:
    if item.error is not None:
        return item.error
    return RuntimeError("unknown failure")


__all__ = [
    "Compiler",
    "GenerationResult",
    "JsonContextDriver",
    "build_candidate",
    "class_name_for",
    "collect_candidates",
    "format_failure_report",
    "generate",
    "infer",
]
