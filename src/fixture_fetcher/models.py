"""Fixture records and per-run results."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

FIXTURE_FIELDS = ("name", "format", "repo", "version", "pattern", "extract_dir", "binary")


class Fixture(BaseModel):
    """One declared test asset, read fresh from the config on every run."""

    model_config = ConfigDict(frozen=True)

    name: str = Field("", description="Display label")
    format: str = Field("", description="Binary format (macho, pe)")
    repo: str = Field("", description="owner/name of the GitHub project")
    version: str = Field("", description="Release tag")
    pattern: str = Field("", description="Glob selecting the release asset")
    extract_dir: str = Field("", description="Output directory relative to the fixtures root")
    binary: str = Field("", description="Artifact path relative to extract_dir")
    arch: str = Field("", description="CPU architecture, display only")

    @property
    def id(self) -> str:
        """Unique identifier: ``{name}-{format}-{arch}``."""
        parts = [self.name, self.format]
        if self.arch:
            parts.append(self.arch)
        return "-".join(parts)

    def target_dir(self, fixtures_root: Path) -> Path:
        return fixtures_root / self.extract_dir

    def binary_path(self, fixtures_root: Path) -> Path:
        return self.target_dir(fixtures_root) / self.binary


class FixtureStatus(Enum):
    """Outcome of processing a single fixture."""

    DOWNLOADED = "downloaded"
    EXISTS = "exists"
    FAILED = "failed"
    SKIPPED = "skipped"  # required local tool is missing
    UNKNOWN_FORMAT = "unknown_format"


@dataclass
class FixtureResult:
    """Result for a single fixture in a run."""

    fixture: Fixture
    status: FixtureStatus
    message: str | None = None
    diagnostics: list[str] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return self.status is FixtureStatus.FAILED


@dataclass
class RunSummary:
    """Ordered results of one orchestrator run."""

    results: list[FixtureResult] = field(default_factory=list)

    def add(self, result: FixtureResult) -> FixtureResult:
        self.results.append(result)
        return result

    def count(self, status: FixtureStatus) -> int:
        return sum(1 for result in self.results if result.status is status)

    @property
    def failed(self) -> list[FixtureResult]:
        return [result for result in self.results if result.failed]

    @property
    def ok(self) -> bool:
        return not self.failed

    @property
    def exit_code(self) -> int:
        """Process exit status: non-zero when any fixture failed."""
        return 0 if self.ok else 1
