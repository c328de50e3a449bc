"""PE fixtures: Windows executables shipped inside installers (NSIS, MSI, ...).

Installers are unpacked with 7-Zip. When 7-Zip is not installed the fixture
is skipped, not failed.
"""

import logging
import os
import shutil
import subprocess
import tempfile
from pathlib import Path

from .base import ExtractionError, ExtractionOutcome

logger = logging.getLogger(__name__)

INSTALL_HINT = "Install: brew install p7zip (macOS) / apt install p7zip-full (Linux)"


def find_file(root: Path, filename: str) -> Path | None:
    """First regular file under ``root`` named ``filename``, ignoring case.

    Directories are walked in sorted order so the match is deterministic.
    """
    wanted = filename.lower()
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for name in sorted(filenames):
            candidate = Path(dirpath) / name
            if name.lower() == wanted and candidate.is_file():
                return candidate
    return None


def list_executables(root: Path) -> list[str]:
    """Every ``*.exe`` file under ``root``, relative to it."""
    return sorted(
        str(p.relative_to(root))
        for p in root.rglob("*")
        if p.is_file() and p.suffix.lower() == ".exe"
    )


def extract_pe(
    target_dir: Path,
    binary_name: str,
    installer: Path,
    sevenzip: str = "7z",
) -> ExtractionOutcome:
    """
    Unpack an installer with 7-Zip and copy the named executable out of it.

    The installer is unpacked into a temporary directory, searched
    recursively (case-insensitive) for ``binary_name`` and the first match is
    copied to ``target_dir/binary_name``. The scratch directory and the
    installer are removed on every exit path.

    Args:
        target_dir: Directory receiving the executable
        binary_name: File name of the executable to pick
        installer: Downloaded installer file
        sevenzip: 7-Zip executable

    Returns:
        Success, a skip when 7-Zip is missing, or a failure listing the
        executables the installer does contain

    Raises:
        ExtractionError: If 7-Zip cannot unpack the installer
    """
    try:
        executable = shutil.which(sevenzip)
        if executable is None:
            return ExtractionOutcome.skip(f"{sevenzip} not found. {INSTALL_HINT}")

        with tempfile.TemporaryDirectory(prefix="fixture-pe-") as scratch:
            scratch_dir = Path(scratch)
            cmd = [executable, "x", str(installer), f"-o{scratch_dir}", "-y"]
            logger.info(f"Running: {' '.join(cmd)}")
            try:
                result = subprocess.run(cmd, capture_output=True, text=True)
            except OSError as e:
                raise ExtractionError(f"Failed to run {sevenzip}: {e}") from e
            if result.returncode != 0:
                raise ExtractionError(
                    f"{sevenzip} failed on {installer.name} (exit {result.returncode}): "
                    f"{(result.stderr or result.stdout).strip()}"
                )

            found = find_file(scratch_dir, Path(binary_name).name)
            if found is None:
                executables = list_executables(scratch_dir)
                diagnostics = ["Executables in installer:"]
                diagnostics.extend(f"  {entry}" for entry in executables or ["(none)"])
                return ExtractionOutcome.failure(
                    f"binary not found in installer: {binary_name}", diagnostics
                )

            binary_path = target_dir / binary_name
            try:
                binary_path.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(found, binary_path)
            except OSError as e:
                raise ExtractionError(f"Cannot write {binary_path}: {e}") from e
            logger.info(f"Copied {found.relative_to(scratch_dir)} to {binary_path}")
            return ExtractionOutcome.ok()
    finally:
        installer.unlink(missing_ok=True)


class PEExtractor:
    format = "pe"

    def __init__(self, sevenzip: str = "7z"):
        self.sevenzip = sevenzip

    def is_available(self) -> bool:
        return shutil.which(self.sevenzip) is not None

    def unavailable_reason(self) -> str:
        return f"{self.sevenzip} not found. {INSTALL_HINT}"

    def extract(self, target_dir: Path, binary_name: str, asset: Path) -> ExtractionOutcome:
        return extract_pe(target_dir, binary_name, asset, sevenzip=self.sevenzip)
