"""Shared types for format extractors."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol


class ExtractionError(Exception):
    """Raised when an archive or installer cannot be unpacked at all."""

    pass


@dataclass
class ExtractionOutcome:
    """Result of turning a downloaded asset into the final artifact."""

    success: bool
    skipped: bool = False
    message: str | None = None
    diagnostics: list[str] = field(default_factory=list)

    @classmethod
    def ok(cls, message: str | None = None) -> "ExtractionOutcome":
        return cls(success=True, message=message)

    @classmethod
    def skip(cls, message: str) -> "ExtractionOutcome":
        return cls(success=True, skipped=True, message=message)

    @classmethod
    def failure(cls, message: str, diagnostics: list[str] | None = None) -> "ExtractionOutcome":
        return cls(success=False, message=message, diagnostics=diagnostics or [])


class Extractor(Protocol):
    """Produces ``target_dir/binary_name`` from a downloaded asset."""

    format: str

    def is_available(self) -> bool:
        """Whether the local tooling this format needs is installed."""
        ...

    def unavailable_reason(self) -> str: ...

    def extract(self, target_dir: Path, binary_name: str, asset: Path) -> ExtractionOutcome: ...
