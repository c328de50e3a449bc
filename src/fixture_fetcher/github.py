"""Release asset fetchers: GitHub REST API over httpx, or the GitHub CLI."""

import fnmatch
import logging
import re
import subprocess
import tempfile
from pathlib import Path
from typing import Any, Protocol
from urllib.parse import quote

import httpx

from .config import Settings

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


class FetchError(Exception):
    """Base exception for release asset download errors."""

    pass


class ReleaseNotFoundError(FetchError):
    """The repository or the release tag does not exist (or is not visible)."""

    pass


class AssetNotFoundError(FetchError):
    """No asset of the release matches the requested pattern."""

    pass


class AssetFetcher(Protocol):
    def fetch(self, version: str, repo: str, pattern: str, dest_dir: Path) -> Path: ...

    def close(self) -> None: ...


def sanitize_user_agent(user_agent: str | None = None) -> str:
    """
    Sanitize or provide default User-Agent header.

    Args:
        user_agent: Optional custom user agent

    Returns:
        Sanitized user agent string
    """
    if user_agent:
        # Remove potentially harmful characters
        sanitized = re.sub(r"[^\w\s\-\.\(\)/;:,]", "", user_agent)
        return sanitized[:200]  # Limit length

    return f"fixture-fetcher/{httpx.__version__}"


def _discard(path: Path) -> None:
    """Remove a partially written download; anything but a regular file is left alone."""
    if path.is_file():
        path.unlink()


def match_asset(assets: list[dict[str, Any]], pattern: str) -> dict[str, Any] | None:
    """First asset, in release order, whose name matches the glob ``pattern``."""
    for asset in assets:
        name = asset.get("name", "")
        if fnmatch.fnmatchcase(name, pattern):
            return asset
    return None


class GitHubReleaseClient:
    """Downloads single release assets through the GitHub REST API."""

    def __init__(
        self,
        api_url: str = "https://api.github.com",
        token: str | None = None,
        timeout: float = 60.0,
        user_agent: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize the API client.

        Args:
            api_url: REST API base URL
            token: Optional API token, sent as a Bearer token
            timeout: Request timeout in seconds
            user_agent: Custom user agent string
            transport: Optional httpx transport (used by tests)
        """
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.user_agent = sanitize_user_agent(user_agent)

        headers = {
            "User-Agent": self.user_agent,
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"

        # httpx drops the Authorization header when a download redirects
        # to another origin (the asset storage host).
        self._client = httpx.Client(
            timeout=timeout,
            follow_redirects=True,
            headers=headers,
            transport=transport,
        )

        logger.debug(
            f"GitHub client initialized: api_url={self.api_url}, "
            f"authenticated={bool(token)}, timeout={timeout}"
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "GitHubReleaseClient":
        return cls(
            api_url=settings.github.api_url,
            token=settings.github.token,
            timeout=settings.github.timeout,
            user_agent=settings.user_agent,
        )

    def get_release(self, repo: str, version: str) -> dict[str, Any]:
        """
        Fetch release metadata for a tag.

        Raises:
            ReleaseNotFoundError: If the repository or tag does not exist
            FetchError: For other HTTP or transport errors
        """
        url = f"{self.api_url}/repos/{repo}/releases/tags/{quote(version, safe='')}"
        logger.info(f"Fetching release info: {url}")

        try:
            response = self._client.get(url)
        except httpx.TimeoutException as e:
            logger.error(f"Timeout fetching release {repo}@{version}: {e}")
            raise FetchError(f"Request timed out after {self.timeout}s") from e
        except httpx.RequestError as e:
            logger.error(f"Request error fetching release {repo}@{version}: {e}")
            raise FetchError(f"Request failed: {e}") from e

        if response.status_code == 404:
            raise ReleaseNotFoundError(f"Release {version} not found in {repo}")
        if response.status_code >= 400:
            raise FetchError(f"HTTP {response.status_code}: {response.reason_phrase}")

        try:
            return response.json()
        except ValueError as e:
            raise FetchError(f"Invalid release response for {repo}@{version}: {e}") from e

    def fetch(self, version: str, repo: str, pattern: str, dest_dir: Path) -> Path:
        """
        Download the asset matching ``pattern`` from release ``version`` of ``repo``.

        The file is written to ``dest_dir`` under the asset's name, replacing
        any existing file. A partially written file is removed on failure.

        Returns:
            Path of the downloaded file

        Raises:
            ReleaseNotFoundError: If the repository or tag does not exist
            AssetNotFoundError: If no asset matches ``pattern``
            FetchError: For other HTTP or transport errors
        """
        release = self.get_release(repo, version)
        assets = release.get("assets") or []
        asset = match_asset(assets, pattern)
        if asset is None:
            available = ", ".join(a.get("name", "?") for a in assets) or "none"
            raise AssetNotFoundError(
                f"No asset matching '{pattern}' in {repo}@{version} (available: {available})"
            )

        dest_dir.mkdir(parents=True, exist_ok=True)
        dest = dest_dir / asset["name"]
        self._download(asset["url"], dest)
        return dest

    def _download(self, url: str, dest: Path) -> None:
        logger.info(f"Starting download from: {url}")

        try:
            with self._client.stream(
                "GET", url, headers={"Accept": "application/octet-stream"}
            ) as response:
                if response.status_code >= 400:
                    raise FetchError(
                        f"HTTP {response.status_code}: {response.reason_phrase}"
                    )
                size = 0
                with dest.open("wb") as f:
                    for chunk in response.iter_bytes(CHUNK_SIZE):
                        f.write(chunk)
                        size += len(chunk)
        except httpx.TimeoutException as e:
            _discard(dest)
            logger.error(f"Timeout downloading {url}: {e}")
            raise FetchError(f"Download timed out after {self.timeout}s") from e
        except httpx.RequestError as e:
            _discard(dest)
            logger.error(f"Request error downloading {url}: {e}")
            raise FetchError(f"Download failed: {e}") from e
        except FetchError:
            _discard(dest)
            raise
        except OSError as e:
            _discard(dest)
            logger.error(f"Cannot write {dest}: {e}")
            raise FetchError(f"Cannot write {dest}: {e}") from e

        logger.info(f"Download completed: {dest.name}, {size} bytes")

    def close(self) -> None:
        """Close the HTTP client and release resources."""
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class GhCliFetcher:
    """Downloads release assets with ``gh release download``."""

    def __init__(self, executable: str = "gh"):
        self.executable = executable

    @classmethod
    def from_settings(cls, settings: Settings) -> "GhCliFetcher":
        return cls(executable=settings.github.gh_executable)

    def fetch(self, version: str, repo: str, pattern: str, dest_dir: Path) -> Path:
        """
        Download the asset matching ``pattern`` into ``dest_dir``.

        ``gh`` writes into a scratch directory first so the downloaded file
        can be told apart from files already present in ``dest_dir``.

        Raises:
            AssetNotFoundError: If gh succeeded but produced no matching file
            FetchError: If gh is missing or exits non-zero
        """
        dest_dir.mkdir(parents=True, exist_ok=True)
        with tempfile.TemporaryDirectory(dir=dest_dir, prefix=".gh-download-") as scratch:
            cmd = [
                self.executable,
                "release",
                "download",
                version,
                "--repo",
                repo,
                "--pattern",
                pattern,
                "--dir",
                scratch,
                "--clobber",
            ]
            logger.info(f"Running: {' '.join(cmd)}")
            try:
                result = subprocess.run(cmd, capture_output=True, text=True)
            except FileNotFoundError as e:
                raise FetchError(f"GitHub CLI not found: {self.executable}") from e

            if result.returncode != 0:
                raise FetchError(
                    f"gh release download failed for {repo}@{version}: {result.stderr.strip()}"
                )

            downloaded = sorted(Path(scratch).iterdir())
            if not downloaded:
                raise AssetNotFoundError(f"No asset matching '{pattern}' in {repo}@{version}")
            if len(downloaded) > 1:
                logger.warning(
                    f"Pattern '{pattern}' matched {len(downloaded)} assets, using {downloaded[0].name}"
                )

            dest = dest_dir / downloaded[0].name
            try:
                downloaded[0].replace(dest)
            except OSError as e:
                raise FetchError(f"Cannot write {dest}: {e}") from e

        return dest

    def close(self) -> None:
        pass


def create_fetcher(settings: Settings) -> AssetFetcher:
    """Build the fetcher backend selected by ``FIXTURES_FETCHER``."""
    if settings.paths.fetcher == "gh":
        return GhCliFetcher.from_settings(settings)
    return GitHubReleaseClient.from_settings(settings)
