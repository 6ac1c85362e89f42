"""
Hugo binary resolution.

Checks whether the installed hugo matches the requested version and,
if not, downloads the extended release archive from GitHub and unpacks
the executable next to the previous one.
"""
import io
import os
import sys
import tarfile
import zipfile
from pathlib import Path
from typing import Optional, Tuple

import requests

from ..exceptions import HugoFetchError
from ..utils.file_utils import ensure_dir, size_in_mb
from ..utils.logger import get_logger
from .command_runner import CommandRunner, SubprocessRunner

log = get_logger(__name__)

RELEASE_URL = (
    "https://github.com/gohugoio/hugo/releases/download/"
    "v{version}/hugo_extended_{version}_{suffix}"
)

DEFAULT_INSTALL_DIR = "~/.sitepub/bin"


def platform_suffix(platform: Optional[str] = None) -> str:
    """Release archive suffix for *platform* (defaults to ``sys.platform``).

    Raises:
        HugoFetchError: For platforms without a published archive
    """
    platform = platform or sys.platform
    if platform == "darwin":
        return "darwin-universal.tar.gz"
    if platform.startswith("linux"):
        return "Linux-64bit.tar.gz"
    if platform in ("win32", "cygwin"):
        return "windows-amd64.zip"
    raise HugoFetchError(f"No hugo release archive for platform '{platform}'")


def extract_hugo(archive: bytes, suffix: str) -> Tuple[str, bytes]:
    """Pull the hugo executable out of a release archive.

    The first member whose file name starts with ``hugo`` is taken.

    Args:
        archive: Archive bytes
        suffix: Release suffix, which selects zip or tar.gz handling

    Returns:
        Tuple of (file name, file contents)

    Raises:
        HugoFetchError: If the archive is unreadable or has no hugo member
    """
    try:
        if suffix.endswith(".zip"):
            with zipfile.ZipFile(io.BytesIO(archive)) as zf:
                for info in zf.infolist():
                    name = os.path.basename(info.filename)
                    if not info.is_dir() and name.startswith("hugo"):
                        return name, zf.read(info)
        else:
            with tarfile.open(fileobj=io.BytesIO(archive), mode="r:gz") as tf:
                for member in tf:
                    name = os.path.basename(member.name)
                    if member.isfile() and name.startswith("hugo"):
                        return name, tf.extractfile(member).read()
    except (zipfile.BadZipFile, tarfile.TarError, OSError) as e:
        raise HugoFetchError(f"Cannot unpack hugo archive: {e}") from e

    raise HugoFetchError("No hugo executable found in the archive")


class HugoFetcher:
    """Makes a specific hugo version available locally.

    Args:
        version: Release version without the leading ``v``
        install_dir: Directory holding the hugo binary
        runner: Command runner used for ``hugo version``
        platform: Override for ``sys.platform``
        timeout: Download timeout in seconds
    """

    def __init__(self, version: str, install_dir=None, runner: Optional[CommandRunner] = None,
                 platform: Optional[str] = None, timeout: float = 300.0):
        self.version = version
        self.install_dir = Path(os.path.expanduser(str(install_dir or DEFAULT_INSTALL_DIR)))
        self.runner = runner or SubprocessRunner()
        self.platform = platform or sys.platform
        self.timeout = timeout

    @property
    def hugo_path(self) -> Path:
        name = "hugo.exe" if self.platform in ("win32", "cygwin") else "hugo"
        return self.install_dir / name

    def needs_fetch(self) -> bool:
        """Check the installed hugo against the requested version.

        Returns:
            True if hugo is missing or reports a different version

        Raises:
            HugoFetchError: If ``hugo version`` runs but fails
        """
        log.info("Requested hugo version: %s", self.version)
        log.info("Checking installed hugo...")

        try:
            result = self.runner.run([str(self.hugo_path), "version"], capture_output=True)
        except OSError:
            log.info("hugo not found, will download it")
            return True

        if not result.success:
            code = "None" if result.returncode is None else result.returncode
            raise HugoFetchError(f"hugo version failed! exit code: {code}")

        if result.stdout.startswith(f"hugo v{self.version}".encode()):
            log.info("Installed hugo matches, skipping download")
            return False

        log.info("Installed hugo differs, updating")
        return True

    def download(self) -> Path:
        """Download and install the requested release.

        Returns:
            Path of the installed executable
        """
        suffix = platform_suffix(self.platform)
        url = RELEASE_URL.format(version=self.version, suffix=suffix)
        log.info("GET %s", url)

        try:
            response = requests.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise HugoFetchError(f"Download failed: {e}") from e

        archive = response.content
        if not archive:
            raise HugoFetchError("Downloaded nothing!")

        log.info("Downloaded: %s MB", size_in_mb(len(archive)))
        log.info("Unpacking...")

        name, contents = extract_hugo(archive, suffix)
        target = self.install_dir / name
        log.info("Saving %s (%s MB)", target, size_in_mb(len(contents)))

        ensure_dir(self.install_dir)
        target.write_bytes(contents)

        if self.platform not in ("win32", "cygwin"):
            log.info("Setting executable permission...")
            os.chmod(target, 0o755)

        return target

    def resolve(self) -> Path:
        """Return the hugo executable path, downloading it first if needed."""
        if self.needs_fetch():
            self.download()
        return self.hugo_path
