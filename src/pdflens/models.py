from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, TypeVar, Union, cast

import numpy as np
from numpy.typing import NDArray
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidatorFunctionWrapHandler,
    model_validator,
)

T = TypeVar("T", bound="AnalysisResult")

_RESULT_KINDS: dict[str, type[AnalysisResult]] = {}


@dataclass
class DocumentInfo:
    """Metadata and first-page thumbnail for one document."""

    path: str
    filename: str
    page_count: int
    thumbnail: NDArray[np.uint8] | None = None

    def __post_init__(self) -> None:
        if self.thumbnail is not None and not isinstance(
            cast(Any, self.thumbnail), np.ndarray
        ):
            raise TypeError("thumbnail must be a numpy.ndarray or None")
        if self.page_count < 0:
            raise ValueError("page_count must be non-negative")


class AnalysisResult(BaseModel):
    """Base for every metric an analyzer can produce.

    Subclasses declare ``kind`` as a ``Literal`` with a default and are
    registered under it on definition. Validating a mapping against this
    base builds the subclass named by its ``kind``.
    """

    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)

    kind: str

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        kind = cls.model_fields["kind"].default
        if not isinstance(kind, str):
            raise TypeError(f"{cls.__name__} must give 'kind' a string default")
        registered = _RESULT_KINDS.get(kind)
        if registered is not None and registered.__qualname__ != cls.__qualname__:
            raise TypeError(
                f"Result kind {kind!r} already used by {registered.__name__}"
            )
        _RESULT_KINDS[kind] = cls

    @model_validator(mode="wrap")
    @classmethod
    def dispatch_kind(
        cls, data: Any, handler: ValidatorFunctionWrapHandler
    ) -> AnalysisResult:
        if cls is not AnalysisResult or not isinstance(data, dict):
            return handler(data)
        kind = data.get("kind")
        variant = _RESULT_KINDS.get(kind) if isinstance(kind, str) else None
        if variant is None:
            raise ValueError(f"unknown result kind {kind!r}")
        return variant.model_validate(data)


class PageCountResult(AnalysisResult):
    """Total number of pages in a document."""

    kind: Literal["page_count"] = "page_count"
    total: int


class ColorAnalysisResult(AnalysisResult):
    """Split of pages into black & white and color."""

    kind: Literal["color_analysis"] = "color_analysis"
    bw_pages: int
    color_pages: int


class PerFileAnalysis(BaseModel):
    """All metric results and errors for one input path."""

    model_config = ConfigDict(extra="forbid", strict=True)

    filename: str
    path: str
    results: list[AnalysisResult] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)

    def find(self, result_type: type[T]) -> T | None:
        """Return the first result of *result_type*, or None if absent."""
        for result in self.results:
            if isinstance(result, result_type):
                return result
        return None


class ProgressSnapshot(BaseModel):
    """Where a running session is, emitted before each analyzer invocation."""

    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)

    current_file: str
    current_analyzer: str
    files_done: int
    files_total: int


class OutputRow(BaseModel):
    """One file's line in an output table."""

    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)

    filename: str
    values: list[tuple[str, str]]


class OutputData(BaseModel):
    """Presentation object produced by an output module."""

    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)

    title: str
    columns: list[str]
    rows: list[OutputRow] = Field(default_factory=list)
    totals: list[tuple[str, str]] = Field(default_factory=list)
    notes: list[str] = Field(default_factory=list)

    def to_text(self) -> str:
        """Render a copyable plain-text report from this object's fields."""
        lines = [f"=== {self.title} ===", ""]
        if self.notes:
            lines.extend(self.notes)
            lines.append("")
        if self.rows:
            lines.append("Per-file breakdown:")
            for row in self.rows:
                cells = ", ".join(f"{label} {value}" for label, value in row.values)
                lines.append(f"  {row.filename}: {cells}")
            lines.append("")
        for label, value in self.totals:
            lines.append(f"{label}: {value}")
        return "\n".join(lines) + "\n"


class ProgressEvent(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)

    snapshot: ProgressSnapshot


class CompletedEvent(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)

    results: list[PerFileAnalysis]


class ErrorEvent(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)

    message: str


SessionEvent = Union[ProgressEvent, CompletedEvent, ErrorEvent]
