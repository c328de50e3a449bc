from pathlib import Path

import pytest
from pydantic import ValidationError

from fixture_fetcher.models import Fixture, FixtureResult, FixtureStatus, RunSummary


@pytest.mark.unit
class TestFixture:
    def test_paths(self):
        fixture = Fixture(name="a", format="macho", extract_dir="a", binary="A.app/Contents/MacOS/A")
        root = Path("/fixtures")
        assert fixture.target_dir(root) == Path("/fixtures/a")
        assert fixture.binary_path(root) == Path("/fixtures/a/A.app/Contents/MacOS/A")

    def test_id_without_arch(self):
        assert Fixture(name="app", format="macho").id == "app-macho"

    def test_frozen(self):
        fixture = Fixture(name="a")
        with pytest.raises(ValidationError):
            fixture.name = "b"


@pytest.mark.unit
class TestRunSummary:
    def test_empty_summary_is_ok(self):
        summary = RunSummary()
        assert summary.ok
        assert summary.exit_code == 0

    def test_counts_and_exit_code(self):
        summary = RunSummary()
        summary.add(FixtureResult(Fixture(name="a"), FixtureStatus.DOWNLOADED))
        summary.add(FixtureResult(Fixture(name="b"), FixtureStatus.FAILED, "boom"))
        summary.add(FixtureResult(Fixture(name="c"), FixtureStatus.SKIPPED))

        assert summary.count(FixtureStatus.DOWNLOADED) == 1
        assert [r.fixture.name for r in summary.failed] == ["b"]
        assert not summary.ok
        assert summary.exit_code == 1

    def test_skips_and_unknown_formats_are_not_failures(self):
        summary = RunSummary()
        summary.add(FixtureResult(Fixture(name="a"), FixtureStatus.SKIPPED))
        summary.add(FixtureResult(Fixture(name="b"), FixtureStatus.UNKNOWN_FORMAT))
        assert summary.exit_code == 0
