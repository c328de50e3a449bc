"""Mach-O fixtures: app bundles shipped as ``.tar.gz`` archives."""

import logging
import tarfile
from pathlib import Path

from .base import ExtractionError, ExtractionOutcome

logger = logging.getLogger(__name__)

MAX_BUNDLE_ENTRIES = 10


def list_bundles(target_dir: Path, limit: int = MAX_BUNDLE_ENTRIES) -> list[str]:
    """``*.app`` files and directories under ``target_dir``, relative to it."""
    bundles = sorted(p for p in target_dir.rglob("*.app"))
    return [str(p.relative_to(target_dir)) for p in bundles[:limit]]


def list_directory(target_dir: Path) -> list[str]:
    if not target_dir.is_dir():
        return []
    return [
        f"{p.name}/" if p.is_dir() else p.name
        for p in sorted(target_dir.iterdir())
    ]


def extract_macho(target_dir: Path, binary_name: str, archive: Path) -> ExtractionOutcome:
    """
    Unpack a tar+gzip archive into ``target_dir`` and check for the binary.

    The archive layout is kept as is, so ``binary_name`` may point inside an
    app bundle (``App.app/Contents/MacOS/App``). The archive is removed on
    every exit path.

    Args:
        target_dir: Directory the archive is unpacked into
        binary_name: Expected artifact path relative to ``target_dir``
        archive: Downloaded ``.tar.gz`` file

    Returns:
        Success if ``target_dir/binary_name`` exists afterwards, otherwise a
        failure carrying a listing of the bundles found

    Raises:
        ExtractionError: If the archive is unreadable
    """
    binary_path = target_dir / binary_name
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        try:
            with tarfile.open(archive, "r:gz") as tar:
                tar.extractall(path=target_dir, filter=tarfile.data_filter)
        except (tarfile.TarError, EOFError, OSError) as e:
            raise ExtractionError(f"Failed to extract archive {archive.name}: {e}") from e

        logger.info(f"Extracted {archive} to {target_dir}")
    finally:
        archive.unlink(missing_ok=True)

    if binary_path.is_file():
        return ExtractionOutcome.ok()

    diagnostics = [f"Expected path: {binary_path}"]
    bundles = list_bundles(target_dir)
    if bundles:
        diagnostics.append("App bundles found:")
        diagnostics.extend(f"  {entry}" for entry in bundles)
    diagnostics.append("Directory contents:")
    diagnostics.extend(f"  {entry}" for entry in list_directory(target_dir))
    return ExtractionOutcome.failure(f"binary not found: {binary_name}", diagnostics)


class MachOExtractor:
    format = "macho"

    def is_available(self) -> bool:
        return True

    def unavailable_reason(self) -> str:
        return ""

    def extract(self, target_dir: Path, binary_name: str, asset: Path) -> ExtractionOutcome:
        return extract_macho(target_dir, binary_name, asset)
