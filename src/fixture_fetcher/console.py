"""Human-readable transcript of a fixture run, written to stdout."""

import sys
from pathlib import Path
from typing import TextIO

from .models import Fixture, FixtureStatus, RunSummary


class Console:
    """Prints one status line per processed fixture."""

    def __init__(self, stream: TextIO | None = None):
        self.stream = stream or sys.stdout

    def _print(self, line: str = "") -> None:
        print(line, file=self.stream, flush=True)

    @staticmethod
    def _label(fixture: Fixture) -> str:
        return f"{fixture.name} ({fixture.format})"

    def banner(self, app_name: str, config_path: Path) -> None:
        self._print(f"📦 {app_name}")
        self._print(f"   Config: {config_path}")
        self._print()

    def exists(self, fixture: Fixture) -> None:
        self._print(f"✅ {self._label(fixture)} - already exists")

    def downloading(self, fixture: Fixture) -> None:
        self._print(f"⬇️  Downloading {self._label(fixture)}...")

    def downloaded(self, fixture: Fixture) -> None:
        self._print(f"✅ {self._label(fixture)} - downloaded")

    def failed(self, fixture: Fixture, message: str, diagnostics: list[str] | None = None) -> None:
        self._print(f"❌ {self._label(fixture)} - {message}")
        for line in diagnostics or []:
            self._print(f"   {line}")

    def skipped(self, fixture: Fixture, reason: str) -> None:
        self._print(f"⚠️  Skipping {self._label(fixture)}: {reason}")

    def unknown_format(self, fixture: Fixture) -> None:
        self._print(f"⚠️  Unknown format: {fixture.format} (fixture: {fixture.name})")

    def done(self, summary: RunSummary) -> None:
        self._print()
        downloaded = summary.count(FixtureStatus.DOWNLOADED)
        existing = summary.count(FixtureStatus.EXISTS)
        skipped = summary.count(FixtureStatus.SKIPPED) + summary.count(FixtureStatus.UNKNOWN_FORMAT)
        failed = len(summary.failed)
        totals = f"{downloaded} downloaded, {existing} already present, {skipped} skipped, {failed} failed"
        if summary.ok:
            self._print(f"🎉 Done! {totals}")
        else:
            self._print(f"💥 Finished with failures: {totals}")
