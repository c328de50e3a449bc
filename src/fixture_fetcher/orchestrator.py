"""Fixture orchestration: filter, cache check, fetch and extract, one fixture at a time."""

import logging
from pathlib import Path

from .config import Settings
from .console import Console
from .extractors import ExtractionError, Extractor, default_extractors
from .fixtures_config import FixturesConfig
from .github import AssetFetcher, FetchError
from .logging_config import log_with_context
from .models import Fixture, FixtureResult, FixtureStatus, RunSummary

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("repo", "version", "pattern", "extract_dir", "binary")


class FixtureOrchestrator:
    """Processes every configured fixture sequentially.

    A failing fixture is reported and the run moves on to the next one; the
    returned ``RunSummary`` lets the caller pick the exit status.
    """

    def __init__(
        self,
        settings: Settings,
        fetcher: AssetFetcher,
        extractors: dict[str, Extractor] | None = None,
        config: FixturesConfig | None = None,
        console: Console | None = None,
    ):
        self.settings = settings
        self.fetcher = fetcher
        self.extractors = (
            extractors
            if extractors is not None
            else default_extractors(sevenzip=settings.sevenzip.executable)
        )
        self._config = config
        self.console = console or Console()

    @property
    def fixtures_root(self) -> Path:
        return self.settings.fixtures_root

    def load_config(self) -> FixturesConfig:
        """The injected config, or a fresh read of the config file."""
        if self._config is not None:
            return self._config
        return FixturesConfig.load(self.settings.config_path)

    def run(self, format_filter: str | None = None) -> RunSummary:
        """
        Process all fixtures, optionally only those of one format.

        Fixtures of other formats are skipped silently: no output and no
        entry in the summary.

        Raises:
            FixturesConfigError: If the config file is malformed
        """
        self.console.banner(self.settings.app_name, self.settings.config_path)
        self.fixtures_root.mkdir(parents=True, exist_ok=True)

        config = self.load_config()
        summary = RunSummary()

        for fixture in config.fixtures():
            if format_filter and format_filter != fixture.format:
                continue

            result = summary.add(self.process(fixture))
            log_with_context(
                logger,
                logging.ERROR if result.failed else logging.INFO,
                f"Fixture {fixture.id}: {result.status.value}",
                fixture=fixture.id,
                repo=fixture.repo,
                version=fixture.version,
                status=result.status.value,
            )

        self.console.done(summary)
        return summary

    def process(self, fixture: Fixture) -> FixtureResult:
        """Bring one fixture's artifact into place unless it already exists."""
        extractor = self.extractors.get(fixture.format)
        if extractor is None:
            self.console.unknown_format(fixture)
            return FixtureResult(fixture, FixtureStatus.UNKNOWN_FORMAT)

        missing = [name for name in REQUIRED_FIELDS if not getattr(fixture, name)]
        if missing:
            message = f"missing field(s): {', '.join(missing)}"
            self.console.failed(fixture, message)
            return FixtureResult(fixture, FixtureStatus.FAILED, message)

        target_dir = fixture.target_dir(self.fixtures_root)
        if fixture.binary_path(self.fixtures_root).exists():
            self.console.exists(fixture)
            return FixtureResult(fixture, FixtureStatus.EXISTS)

        if not extractor.is_available():
            reason = extractor.unavailable_reason()
            self.console.skipped(fixture, reason)
            return FixtureResult(fixture, FixtureStatus.SKIPPED, reason)

        self.console.downloading(fixture)
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Cannot create {target_dir} for {fixture.id}: {e}")
            return self._failed(fixture, f"cannot create {target_dir}: {e}")

        try:
            asset = self.fetcher.fetch(
                fixture.version, fixture.repo, fixture.pattern, self.fixtures_root
            )
        except FetchError as e:
            logger.error(f"Fetch failed for {fixture.id}: {e}")
            return self._failed(fixture, f"download failed: {e}")

        try:
            outcome = extractor.extract(target_dir, fixture.binary, asset)
        except ExtractionError as e:
            logger.error(f"Extraction failed for {fixture.id}: {e}")
            return self._failed(fixture, str(e))
        finally:
            asset.unlink(missing_ok=True)

        if outcome.skipped:
            self.console.skipped(fixture, outcome.message or "")
            return FixtureResult(fixture, FixtureStatus.SKIPPED, outcome.message)
        if not outcome.success:
            return self._failed(fixture, outcome.message or "extraction failed", outcome.diagnostics)

        self.console.downloaded(fixture)
        return FixtureResult(fixture, FixtureStatus.DOWNLOADED)

    def _failed(
        self, fixture: Fixture, message: str, diagnostics: list[str] | None = None
    ) -> FixtureResult:
        self.console.failed(fixture, message, diagnostics)
        return FixtureResult(fixture, FixtureStatus.FAILED, message, diagnostics or [])
