# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Acquire and cache the InspectCode analysis engine.

The engine ships inside the ReSharper command line tools archive. The archive is
downloaded once into ``<tempdir>/ReSharper-Tools`` and reused by later runs. A
cache counts as populated only when the engine binary itself exists, so an
interrupted extraction is retried from scratch on the next run.
"""

from __future__ import annotations

import logging
import os
import platform
import shutil
import stat
import sys
import tempfile
import zipfile
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Final, Protocol

import requests

from .errors import ProvisioningError

TOOLS_DIR_NAME: Final[str] = "ReSharper-Tools"
DEFAULT_TOOLS_VERSION: Final[str] = "2020.3.2"
TOOLS_VERSION_ENV: Final[str] = "CODECUTTER_TOOLS_VERSION"
DOWNLOAD_URL_TEMPLATE: Final[str] = (
    "https://download.jetbrains.com/resharper/dotUltimate.{version}/"
    "JetBrains.ReSharper.CommandLineTools.{version}.zip"
)
DOWNLOAD_TIMEOUT: Final[tuple[float, float]] = (30.0, 300.0)
DOWNLOAD_CHUNK_SIZE: Final[int] = 64 * 1024
PATH_TRAVERSAL_COMPONENT: Final[str] = ".."

WINDOWS_64_BINARY: Final[str] = "inspectcode.exe"
WINDOWS_32_BINARY: Final[str] = "inspectcode.x86.exe"
POSIX_BINARY: Final[str] = "inspectcode.sh"

ProgressCallback = Callable[[int, int | None], None]

LOGGER = logging.getLogger(__name__)


class HttpTransport(Protocol):
    """Byte transfer capability used to fetch the engine archive."""

    def fetch(self, url: str, destination: Path, progress: ProgressCallback | None = None) -> Path:
        """Download ``url`` into ``destination``.

        Args:
            url: Remote artifact location.
            destination: Local file receiving the payload.
            progress: Optional callback receiving ``(bytes_done, total_or_None)``.

        Returns:
            Path: The populated destination file.
        """

        raise NotImplementedError


class RequestsTransport:
    """Stream downloads with :mod:`requests`."""

    def __init__(self, *, session: requests.Session | None = None, timeout: tuple[float, float] = DOWNLOAD_TIMEOUT):
        self._session = session
        self._timeout = timeout

    def fetch(self, url: str, destination: Path, progress: ProgressCallback | None = None) -> Path:
        """Stream ``url`` into ``destination`` reporting progress per chunk.

        Args:
            url: Remote artifact location.
            destination: Local file receiving the payload.
            progress: Optional callback receiving ``(bytes_done, total_or_None)``.

        Returns:
            Path: The populated destination file.

        Raises:
            requests.RequestException: On connection failures or HTTP error statuses.
            OSError: If ``destination`` cannot be written.
        """

        get = self._session.get if self._session is not None else requests.get
        with get(url, stream=True, timeout=self._timeout) as response:
            response.raise_for_status()
            total = _content_length(response.headers.get("Content-Length"))
            done = 0
            with destination.open("wb") as handle:
                for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                    if not chunk:
                        continue
                    handle.write(chunk)
                    done += len(chunk)
                    if progress is not None:
                        progress(done, total)
        return destination


def _content_length(raw: str | None) -> int | None:
    """Return the declared body size, or ``None`` when absent or unparsable."""

    if raw is None:
        return None
    try:
        value = int(raw)
    except ValueError:
        return None
    return value if value >= 0 else None


def engine_binary_name(*, system: str | None = None, is_64bit: bool | None = None) -> str:
    """Return the engine executable name for the host.

    Args:
        system: Platform name as reported by :func:`platform.system`.
        is_64bit: Whether the current process is 64-bit.

    Returns:
        str: File name of the engine launcher inside the archive.
    """

    system_name = (system if system is not None else platform.system()).lower()
    wide = is_64bit if is_64bit is not None else sys.maxsize > 2**32
    if system_name != "windows":
        return POSIX_BINARY
    return WINDOWS_64_BINARY if wide else WINDOWS_32_BINARY


def resolve_tools_version() -> str:
    """Return the engine archive version, honouring :data:`TOOLS_VERSION_ENV`."""

    override = os.environ.get(TOOLS_VERSION_ENV, "").strip()
    return override or DEFAULT_TOOLS_VERSION


@dataclass(frozen=True, slots=True)
class ToolProvisioner:
    """Guarantee a cached copy of the analysis engine exists."""

    cache_dir: Path
    transport: HttpTransport
    version: str = DEFAULT_TOOLS_VERSION
    binary_name: str = WINDOWS_64_BINARY

    @property
    def binary_path(self) -> Path:
        """Return the expected location of the engine executable."""

        return self.cache_dir / self.binary_name

    @property
    def download_url(self) -> str:
        """Return the archive URL for :attr:`version`."""

        return DOWNLOAD_URL_TEMPLATE.format(version=self.version)

    def is_cached(self) -> bool:
        """Return ``True`` when the engine binary is already present."""

        return self.binary_path.is_file()

    def ensure(self, progress: ProgressCallback | None = None) -> Path:
        """Return the engine path, downloading and unpacking it when absent.

        Args:
            progress: Optional download progress callback.

        Returns:
            Path: Location of the cached engine executable.

        Raises:
            ProvisioningError: If the download or extraction fails, or the
                archive does not contain the expected executable.
        """

        if self.is_cached():
            LOGGER.debug("reusing cached engine %s", self.binary_path)
            return self.binary_path

        archive = self._download(progress)
        try:
            self._populate_cache(archive)
        finally:
            archive.unlink(missing_ok=True)

        if not self.is_cached():
            raise ProvisioningError(f"{self.binary_name} not found in {self.download_url}")
        if os.name != "nt":
            _make_executable(self.binary_path)
        return self.binary_path

    def _download(self, progress: ProgressCallback | None) -> Path:
        """Fetch the archive into a fresh temporary file."""

        handle, raw_path = tempfile.mkstemp(prefix="codecutter-tools-", suffix=".zip")
        os.close(handle)
        archive = Path(raw_path)
        LOGGER.debug("downloading %s to %s", self.download_url, archive)
        try:
            return self.transport.fetch(self.download_url, archive, progress)
        except (requests.RequestException, OSError) as exc:
            archive.unlink(missing_ok=True)
            raise ProvisioningError(f"Failed to download {self.download_url}: {exc}") from exc

    def _populate_cache(self, archive: Path) -> None:
        """Wipe the cache directory and extract ``archive`` into it."""

        try:
            if self.cache_dir.exists():
                shutil.rmtree(self.cache_dir)
            self.cache_dir.mkdir(parents=True)
            _extract_archive(archive, self.cache_dir)
        except zipfile.BadZipFile as exc:
            raise ProvisioningError(f"Downloaded archive is not a valid zip file: {exc}") from exc
        except OSError as exc:
            raise ProvisioningError(f"Failed to extract tools into {self.cache_dir}: {exc}") from exc


def _extract_archive(archive: Path, destination: Path) -> None:
    """Extract every member of ``archive`` below ``destination``.

    Raises:
        ProvisioningError: If a member would escape ``destination``.
    """

    with zipfile.ZipFile(archive) as bundle:
        for name in bundle.namelist():
            member = Path(name)
            if member.is_absolute() or PATH_TRAVERSAL_COMPONENT in member.parts:
                raise ProvisioningError(f"Unsafe path in tools archive: {name}")
        bundle.extractall(destination)


def _make_executable(path: Path) -> None:
    """Set executable permissions on ``path`` for user/group/other."""

    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


__all__ = [
    "DEFAULT_TOOLS_VERSION",
    "DOWNLOAD_URL_TEMPLATE",
    "TOOLS_DIR_NAME",
    "HttpTransport",
    "ProgressCallback",
    "RequestsTransport",
    "ToolProvisioner",
    "engine_binary_name",
    "resolve_tools_version",
]
