"""Reader for the declarative fixture configuration.

The config is a TOML file with one ``[[fixture]]`` table per record::

    [[fixture]]
    name = "app"
    format = "macho"
    repo = "owner/app"
    version = "v1.2.0"
    pattern = "app_aarch64.app.tar.gz"
    extract_dir = "macho/aarch64"
    binary = "App.app/Contents/MacOS/app"

Tables other than ``fixture`` are ignored. Only string values are
returned; anything else reads as an empty string.
"""

import logging
import tomllib
from pathlib import Path
from typing import Any

from .models import FIXTURE_FIELDS, Fixture

logger = logging.getLogger(__name__)

FIXTURE_TABLE = "fixture"


class FixturesConfigError(Exception):
    """Raised when the fixture config file cannot be parsed."""

    pass


class FixturesConfig:
    """Ordered, read-only view over the ``[[fixture]]`` records of a config file."""

    def __init__(self, records: list[dict[str, Any]], path: Path | None = None):
        self.path = path
        self._records = records

    @classmethod
    def load(cls, path: Path) -> "FixturesConfig":
        """
        Load fixture records from a TOML file.

        An absent or empty file yields zero records.

        Raises:
            FixturesConfigError: If the file is not valid TOML or the
                ``fixture`` key is not an array of tables
        """
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info(f"Fixture config not found: {path}")
            return cls([], path)
        except OSError as e:
            raise FixturesConfigError(f"Cannot read {path}: {e}") from e

        return cls.from_string(text, path)

    @classmethod
    def from_string(cls, text: str, path: Path | None = None) -> "FixturesConfig":
        """Parse fixture records from TOML text."""
        source = path or "<string>"
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as e:
            raise FixturesConfigError(f"Invalid fixture config {source}: {e}") from e

        records = data.get(FIXTURE_TABLE, [])
        if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
            raise FixturesConfigError(
                f"Invalid fixture config {source}: '{FIXTURE_TABLE}' must be declared as [[{FIXTURE_TABLE}]] tables"
            )

        logger.debug(f"Loaded {len(records)} fixture record(s) from {source}")
        return cls(records, path)

    def count_fixtures(self) -> int:
        """Number of fixture records; 0 for an absent or empty config."""
        return len(self._records)

    def get_field(self, index: int, field_name: str) -> str:
        """
        Value of ``field_name`` in the ``index``-th record (0-based).

        Returns an empty string when the index is out of range, the field is
        absent, or its value is not a string.
        """
        if index < 0 or index >= len(self._records):
            return ""
        value = self._records[index].get(field_name)
        return value if isinstance(value, str) else ""

    def get_fixture(self, index: int) -> Fixture:
        """Typed record at ``index``; no cross-field validation is done."""
        values = {name: self.get_field(index, name) for name in FIXTURE_FIELDS}
        return Fixture(arch=self.get_field(index, "arch"), **values)

    def fixtures(self) -> list[Fixture]:
        """All records as ``Fixture`` objects, in declaration order."""
        return [self.get_fixture(i) for i in range(self.count_fixtures())]
