# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for downloading and caching the InspectCode engine."""

from __future__ import annotations

from pathlib import Path

import pytest
import requests

from codecutter.errors import ProvisioningError
from codecutter.provisioning import (
    DEFAULT_TOOLS_VERSION,
    POSIX_BINARY,
    TOOLS_VERSION_ENV,
    WINDOWS_32_BINARY,
    WINDOWS_64_BINARY,
    RequestsTransport,
    ToolProvisioner,
    engine_binary_name,
    resolve_tools_version,
)
from helpers.fakes import FakeTransport, build_tools_archive


def _provisioner(cache_dir: Path, transport: FakeTransport) -> ToolProvisioner:
    return ToolProvisioner(cache_dir=cache_dir, transport=transport, version="2020.3.2")


def test_ensure_downloads_and_extracts_once(tmp_path: Path) -> None:
    transport = FakeTransport(build_tools_archive([WINDOWS_64_BINARY, "lib/JetBrains.Platform.dll"]))
    provisioner = _provisioner(tmp_path / "ReSharper-Tools", transport)
    reported: list[tuple[int, int | None]] = []

    first = provisioner.ensure(lambda done, total: reported.append((done, total)))
    second = provisioner.ensure()

    assert first == second == tmp_path / "ReSharper-Tools" / WINDOWS_64_BINARY
    assert first.is_file()
    assert (tmp_path / "ReSharper-Tools" / "lib" / "JetBrains.Platform.dll").is_file()
    assert transport.calls == [provisioner.download_url]
    assert reported[-1][0] == reported[-1][1]


def test_ensure_skips_network_when_binary_is_cached(tmp_path: Path) -> None:
    cache_dir = tmp_path / "ReSharper-Tools"
    cache_dir.mkdir()
    (cache_dir / WINDOWS_64_BINARY).write_text("", encoding="utf-8")
    transport = FakeTransport()

    _provisioner(cache_dir, transport).ensure()

    assert transport.calls == []


def test_ensure_wipes_stale_cache_directory(tmp_path: Path) -> None:
    cache_dir = tmp_path / "ReSharper-Tools"
    cache_dir.mkdir()
    (cache_dir / "partial.dll").write_text("", encoding="utf-8")

    _provisioner(cache_dir, FakeTransport()).ensure()

    assert not (cache_dir / "partial.dll").exists()
    assert (cache_dir / WINDOWS_64_BINARY).is_file()


def test_download_failure_is_fatal(tmp_path: Path) -> None:
    transport = FakeTransport(error=requests.ConnectionError("offline"))
    provisioner = _provisioner(tmp_path / "ReSharper-Tools", transport)

    with pytest.raises(ProvisioningError, match="Failed to download"):
        provisioner.ensure()

    assert not provisioner.is_cached()


def test_corrupt_archive_is_fatal(tmp_path: Path) -> None:
    provisioner = _provisioner(tmp_path / "ReSharper-Tools", FakeTransport(b"not a zip"))

    with pytest.raises(ProvisioningError, match="not a valid zip"):
        provisioner.ensure()

    assert not provisioner.is_cached()


def test_archive_without_engine_is_not_reported_as_cached(tmp_path: Path) -> None:
    provisioner = _provisioner(tmp_path / "ReSharper-Tools", FakeTransport(build_tools_archive(["readme.txt"])))

    with pytest.raises(ProvisioningError, match=WINDOWS_64_BINARY):
        provisioner.ensure()

    assert provisioner.cache_dir.is_dir()
    assert not provisioner.is_cached()


def test_archive_with_traversal_member_is_rejected(tmp_path: Path) -> None:
    archive = build_tools_archive([WINDOWS_64_BINARY, "../escape.txt"])
    provisioner = _provisioner(tmp_path / "cache" / "ReSharper-Tools", FakeTransport(archive))

    with pytest.raises(ProvisioningError, match="Unsafe path"):
        provisioner.ensure()

    assert not (tmp_path / "cache" / "escape.txt").exists()


@pytest.mark.parametrize(
    ("system", "is_64bit", "expected"),
    [
        ("Windows", True, WINDOWS_64_BINARY),
        ("Windows", False, WINDOWS_32_BINARY),
        ("Linux", True, POSIX_BINARY),
        ("Darwin", False, POSIX_BINARY),
    ],
)
def test_engine_binary_name_depends_on_platform(system: str, is_64bit: bool, expected: str) -> None:
    assert engine_binary_name(system=system, is_64bit=is_64bit) == expected


def test_tools_version_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(TOOLS_VERSION_ENV, raising=False)
    assert resolve_tools_version() == DEFAULT_TOOLS_VERSION

    monkeypatch.setenv(TOOLS_VERSION_ENV, "2023.1.1")
    assert resolve_tools_version() == "2023.1.1"


class _FakeResponse:
    def __init__(self, chunks: list[bytes], headers: dict[str, str], *, status_error: Exception | None = None) -> None:
        self._chunks = chunks
        self.headers = headers
        self._status_error = status_error

    def __enter__(self) -> _FakeResponse:
        return self

    def __exit__(self, *exc_info: object) -> None:
        return None

    def raise_for_status(self) -> None:
        if self._status_error is not None:
            raise self._status_error

    def iter_content(self, chunk_size: int = 1) -> list[bytes]:
        del chunk_size
        return self._chunks


class _FakeSession:
    def __init__(self, response: _FakeResponse) -> None:
        self.response = response
        self.requests: list[tuple[str, dict[str, object]]] = []

    def get(self, url: str, **kwargs: object) -> _FakeResponse:
        self.requests.append((url, kwargs))
        return self.response


def test_requests_transport_streams_and_reports_progress(tmp_path: Path) -> None:
    session = _FakeSession(_FakeResponse([b"abc", b"", b"de"], {"Content-Length": "5"}))
    transport = RequestsTransport(session=session)  # type: ignore[arg-type]
    reported: list[tuple[int, int | None]] = []

    destination = transport.fetch("https://example.invalid/tools.zip", tmp_path / "tools.zip", lambda d, t: reported.append((d, t)))

    assert destination.read_bytes() == b"abcde"
    assert reported == [(3, 5), (5, 5)]
    assert session.requests[0][1]["stream"] is True


def test_requests_transport_without_length_reports_unknown_total(tmp_path: Path) -> None:
    session = _FakeSession(_FakeResponse([b"abc"], {}))
    transport = RequestsTransport(session=session)  # type: ignore[arg-type]
    reported: list[tuple[int, int | None]] = []

    transport.fetch("https://example.invalid/tools.zip", tmp_path / "tools.zip", lambda d, t: reported.append((d, t)))

    assert reported == [(3, None)]


def test_requests_transport_http_error_becomes_provisioning_error(tmp_path: Path) -> None:
    error = requests.HTTPError("404 Client Error")
    session = _FakeSession(_FakeResponse([], {}, status_error=error))
    provisioner = ToolProvisioner(
        cache_dir=tmp_path / "ReSharper-Tools",
        transport=RequestsTransport(session=session),  # type: ignore[arg-type]
    )

    with pytest.raises(ProvisioningError, match="404"):
        provisioner.ensure()
