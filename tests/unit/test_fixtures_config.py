"""Unit tests for the fixture config reader."""

import pytest

from fixture_fetcher.fixtures_config import FixturesConfig, FixturesConfigError
from tests.fixtures.data_fixtures import fixture_block


@pytest.mark.unit
class TestCountFixtures:
    def test_absent_file(self, tmp_path):
        config = FixturesConfig.load(tmp_path / "missing.toml")
        assert config.count_fixtures() == 0

    def test_empty_file(self, write_config):
        config = FixturesConfig.load(write_config(""))
        assert config.count_fixtures() == 0

    def test_counts_records_in_order(self, write_config, example_config_text):
        config = FixturesConfig.load(write_config(example_config_text))
        assert config.count_fixtures() == 2
        assert [f.name for f in config.fixtures()] == ["a", "b"]

    def test_other_tables_are_not_counted(self):
        text = fixture_block(name="a") + '\n[[other]]\nname = "x"\n\n' + fixture_block(name="b")
        config = FixturesConfig.from_string(text)
        assert config.count_fixtures() == 2
        assert config.get_field(1, "name") == "b"


@pytest.mark.unit
class TestGetField:
    @pytest.fixture
    def config(self, example_config_text):
        return FixturesConfig.from_string(example_config_text)

    @pytest.mark.parametrize(
        "index, field, expected",
        [
            (0, "name", "a"),
            (0, "repo", "o/r"),
            (0, "binary", "A.app/Contents/MacOS/A"),
            (1, "format", "pe"),
            (1, "repo", "o/r2"),
            (1, "pattern", "b.zip"),
        ],
    )
    def test_reads_values(self, config, index, field, expected):
        assert config.get_field(index, field) == expected

    @pytest.mark.parametrize("index", [2, 100, -1])
    def test_out_of_range_index(self, config, index):
        assert config.get_field(index, "name") == ""

    def test_absent_field(self, config):
        assert config.get_field(0, "arch") == ""

    def test_non_string_value_reads_empty(self):
        text = fixture_block(name="a") + "expected_asset_count = 12\n"
        config = FixturesConfig.from_string(text)
        assert config.get_field(0, "expected_asset_count") == ""
        assert config.get_field(0, "name") == "a"

    def test_field_isolation_between_records(self):
        text = fixture_block(name="first", version="v1") + fixture_block(
            name="second", repo="owner/second", version="v2"
        )
        config = FixturesConfig.from_string(text)
        assert config.get_field(0, "repo") == ""
        assert config.get_field(1, "repo") == "owner/second"
        assert config.get_field(0, "version") == "v1"

    def test_field_after_foreign_table_does_not_leak(self):
        text = fixture_block(name="a") + '[[other]]\nrepo = "foreign/repo"\n'
        config = FixturesConfig.from_string(text)
        assert config.get_field(0, "repo") == ""


@pytest.mark.unit
class TestTypedRecords:
    def test_get_fixture(self, example_config_text):
        fixture = FixturesConfig.from_string(example_config_text).get_fixture(1)
        assert fixture.name == "b"
        assert fixture.format == "pe"
        assert fixture.extract_dir == "b"
        assert fixture.binary == "b.exe"

    def test_unknown_format_is_not_validated(self):
        config = FixturesConfig.from_string(fixture_block(name="x", format="elf"))
        assert config.get_fixture(0).format == "elf"

    def test_arch_is_read(self):
        config = FixturesConfig.from_string(fixture_block(name="app", format="pe", arch="x64"))
        assert config.get_fixture(0).id == "app-pe-x64"

    def test_fixtures_in_declaration_order(self, example_config_text):
        fixtures = FixturesConfig.from_string(example_config_text).fixtures()
        assert [(f.name, f.format, f.repo) for f in fixtures] == [
            ("a", "macho", "o/r"),
            ("b", "pe", "o/r2"),
        ]
        assert fixtures[0].binary == "A.app/Contents/MacOS/A"
        assert fixtures[1].pattern == "b.zip"

    def test_fixtures_empty_for_absent_file(self, tmp_path):
        assert FixturesConfig.load(tmp_path / "missing.toml").fixtures() == []

    def test_fixtures_keep_records_separate(self):
        text = fixture_block(name="first", repo="owner/first") + fixture_block(name="second")
        first, second = FixturesConfig.from_string(text).fixtures()
        assert first.repo == "owner/first"
        assert second.repo == ""


@pytest.mark.unit
class TestMalformedConfig:
    @pytest.mark.parametrize(
        "text",
        [
            "[[fixture]\nname = 'a'\n",
            'fixture = "not a table"\n',
            '[[fixture]]\nname = "a"\nname = "b"\n',
        ],
    )
    def test_invalid_config_raises(self, text):
        with pytest.raises(FixturesConfigError, match="Invalid fixture config"):
            FixturesConfig.from_string(text)

    def test_load_reports_path(self, write_config):
        path = write_config("[[fixture]\n")
        with pytest.raises(FixturesConfigError, match="fixtures.toml"):
            FixturesConfig.load(path)
