"""Tests for the command-line entry point."""

from unittest.mock import patch

import pytest

from fixture_fetcher.cli import EXIT_CONFIG_ERROR, build_parser, main
from tests.fixtures.data_fixtures import fixture_block
from tests.fixtures.mock_fixtures import FakeFetcher


@pytest.fixture
def cli_env(clean_env, fixtures_root, restore_logging):
    clean_env.setenv("FIXTURES_ROOT", str(fixtures_root))
    return fixtures_root


class TestParser:
    def test_format_is_optional(self):
        assert build_parser().parse_args([]).format == ""
        assert build_parser().parse_args(["pe"]).format == "pe"

    def test_rejects_extra_arguments(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["macho", "pe"])


class TestMain:
    def test_no_config_exits_zero(self, cli_env, capsys):
        assert main([]) == 0
        out = capsys.readouterr().out
        assert "📦 Test Fixtures Downloader" in out
        assert "🎉 Done!" in out

    def test_malformed_config(self, cli_env, capsys):
        (cli_env / "fixtures.toml").write_text("[[fixture]\n", encoding="utf-8")

        assert main([]) == EXIT_CONFIG_ERROR
        assert "Invalid fixture config" in capsys.readouterr().err

    def test_invalid_settings(self, cli_env, clean_env, capsys):
        clean_env.setenv("FIXTURES_FETCHER", "carrier-pigeon")

        assert main([]) == EXIT_CONFIG_ERROR
        assert "Invalid configuration" in capsys.readouterr().err

    def test_failed_fixture_exits_one(self, cli_env, capsys):
        (cli_env / "fixtures.toml").write_text(
            fixture_block(
                name="a", format="macho", repo="o/r", version="v1",
                pattern="a.tar.gz", extract_dir="a", binary="bin",
            ),
            encoding="utf-8",
        )
        fetcher = FakeFetcher()

        with patch("fixture_fetcher.cli.create_fetcher", return_value=fetcher):
            assert main(["macho"]) == 1

        assert fetcher.closed
        assert "❌ a (macho) - download failed" in capsys.readouterr().out

    def test_filter_is_passed_through(self, cli_env, capsys):
        (cli_env / "fixtures.toml").write_text(
            fixture_block(
                name="a", format="macho", repo="o/r", version="v1",
                pattern="a.tar.gz", extract_dir="a", binary="bin",
            ),
            encoding="utf-8",
        )
        fetcher = FakeFetcher()

        with patch("fixture_fetcher.cli.create_fetcher", return_value=fetcher):
            assert main(["pe"]) == 0

        assert fetcher.calls == []
        assert "a (macho)" not in capsys.readouterr().out
