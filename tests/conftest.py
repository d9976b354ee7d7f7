"""Shared test fixtures for the verification client test suite.

Provides:
    - Settings instances isolated from the real environment and .env
    - A scripted httpx.MockTransport standing in for the verification service
    - Sample project metadata and source files on disk
"""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest

from voyager_verifier.config import Settings, get_settings
from voyager_verifier.domain.enums import SupportedCairoVersions, SupportedScarbVersions
from voyager_verifier.domain.submission import FileInfo, ProjectMetadataInfo


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_settings():
    """Build Settings that ignore any .env file in the working directory."""

    def _make(**overrides) -> Settings:
        return Settings(_env_file=None, **overrides)

    return _make


@pytest.fixture
def settings(make_settings) -> Settings:
    return make_settings()


class ScriptedService:
    """Replays a fixed list of responses and records every request."""

    def __init__(self, responses: list[httpx.Response]) -> None:
        self._responses = list(responses)
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._responses:
            raise AssertionError(f"Unexpected extra request: {request.method} {request.url}")
        return self._responses.pop(0)

    @property
    def remaining(self) -> int:
        return len(self._responses)


@pytest.fixture
def scripted_service():
    """Factory: scripted_service(resp1, resp2, ...) -> ScriptedService."""

    def _make(*responses: httpx.Response) -> ScriptedService:
        return ScriptedService(list(responses))

    return _make


def _job_record(status: int, description: str | None = None, **extra) -> dict:
    """A job record body as returned by GET /class-verify/job/{job_id}."""
    record = {
        "job_id": "abc123",
        "status": status,
        "status_description": description,
        "class_hash": "0x044dc2b3239382230d8b1e943df23b96f52eebcac93efe6e8bde92f9a2f1da18",
        "created_timestamp": 1718000000.0,
        "updated_timestamp": 1718000042.5,
        "address": None,
        "contract_file": "src/lib.cairo",
        "name": "HelloStarknet",
        "version": "2.8.4",
        "license": "MIT",
    }
    record.update(extra)
    return record


@pytest.fixture
def job_record():
    """Factory: job_record(status, description=None, **extra) -> dict."""
    return _job_record


@pytest.fixture
def project_metadata() -> ProjectMetadataInfo:
    return ProjectMetadataInfo(
        cairo_version=SupportedCairoVersions.V2_8_4,
        scarb_version=SupportedScarbVersions.V2_8_4,
        project_dir_path=".",
        contract_file="src/lib.cairo",
    )


@pytest.fixture
def source_files(tmp_path: Path) -> list[FileInfo]:
    """Two small Cairo sources plus the manifest, written to tmp_path."""
    (tmp_path / "src").mkdir()
    lib = tmp_path / "src" / "lib.cairo"
    lib.write_text("mod contract;\n", encoding="utf-8")
    contract = tmp_path / "src" / "contract.cairo"
    contract.write_text(
        "#[starknet::contract]\nmod HelloStarknet {\n    // 100%&=+ raw text\n}\n",
        encoding="utf-8",
    )
    manifest = tmp_path / "Scarb.toml"
    manifest.write_text('[package]\nname = "hello"\nversion = "0.1.0"\n', encoding="utf-8")
    return [
        FileInfo(name="src/lib.cairo", path=lib),
        FileInfo(name="src/contract.cairo", path=contract),
        FileInfo(name="Scarb.toml", path=manifest),
    ]
