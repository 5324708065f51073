"""Core data models shared across jsoncontext components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .shapes import TypeShape

DEFAULT_MASK = "*.json"
DEFAULT_SAMPLE_COUNT = 1000


class InputKind(str, Enum):
    """Where an input's files come from."""

    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class InputSource:
    """One configured origin of JSON data."""

    kind: InputKind
    path: str
    mask: str = DEFAULT_MASK
    recursive: bool = False
    sample_count: int = DEFAULT_SAMPLE_COUNT

    def __post_init__(self) -> None:
        if self.sample_count < 0:
            object.__setattr__(self, "sample_count", 0)

    @classmethod
    def file(cls, path: str, sample_count: int = DEFAULT_SAMPLE_COUNT) -> "InputSource":
        return cls(kind=InputKind.FILE, path=str(path), sample_count=sample_count)

    @classmethod
    def directory(
        cls,
        path: str,
        mask: str = DEFAULT_MASK,
        *,
        recursive: bool = False,
        sample_count: int = DEFAULT_SAMPLE_COUNT,
    ) -> "InputSource":
        return cls(
            kind=InputKind.DIRECTORY,
            path=str(path),
            mask=mask,
            recursive=recursive,
            sample_count=sample_count,
        )


@dataclass(frozen=True)
class GeneratedClass:
    """Terminal artifact for one concrete data file."""

    class_name: str
    data_file_path: str
    shape: Optional[TypeShape] = None
    definition: str = ""
    success: bool = True
    error: Optional[BaseException] = None
    source_index: int = 0


@dataclass(frozen=True)
class Accessor:
    """Container property that re-reads one data file as a list of its class."""

    name: str
    class_name: str
    data_file_path: str


@dataclass(frozen=True)
class SourceFailure:
    """Report-channel entry for a source that could not be sampled or inferred."""

    path: str
    error: BaseException

    @property
    def message(self) -> str:
        return str(self.error) or type(self.error).__name__


@dataclass
class TypeGraph:
    """Uniquely named classes plus their accessors for one driver invocation."""

    classes: List[GeneratedClass] = field(default_factory=list)
    accessors: List[Accessor] = field(default_factory=list)
    failures: List[GeneratedClass] = field(default_factory=list)

    @property
    def class_names(self) -> List[str]:
        return [item.class_name for item in self.classes]
