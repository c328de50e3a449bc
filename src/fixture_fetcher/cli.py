"""Command-line entry point: ``fixture-fetcher [FORMAT]``."""

import argparse
import sys

from pydantic import ValidationError

from .config import get_settings
from .fixtures_config import FixturesConfigError
from .github import create_fetcher
from .logging_config import get_logger, setup_logging
from .orchestrator import FixtureOrchestrator

EXIT_CONFIG_ERROR = 2

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fixture-fetcher",
        description="Download prebuilt binary test fixtures from GitHub release assets.",
        epilog=(
            "Configured through environment variables: FIXTURES_ROOT, FIXTURES_CONFIG, "
            "FIXTURES_FETCHER, GITHUB_TOKEN, SEVENZIP_EXECUTABLE, LOG_LEVEL, LOG_JSON_LOGS."
        ),
    )
    parser.add_argument(
        "format",
        nargs="?",
        default="",
        help="only process fixtures of this format (macho, pe); all when omitted",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Run the fetcher and return the process exit status.

    Returns:
        0 when no fixture failed, 1 when at least one did, 2 on a
        configuration error
    """
    args = build_parser().parse_args(argv)

    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"Invalid configuration:\n{e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    setup_logging(settings.logging)
    for message in settings.validate_settings():
        if message.startswith("WARNING: "):
            logger.warning(message.removeprefix("WARNING: "))
        else:
            logger.info(message.removeprefix("INFO: "))

    fetcher = create_fetcher(settings)
    try:
        summary = FixtureOrchestrator(settings, fetcher).run(args.format or None)
    except FixturesConfigError as e:
        logger.error(str(e))
        print(f"❌ {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    finally:
        fetcher.close()

    return summary.exit_code


if __name__ == "__main__":
    sys.exit(main())
