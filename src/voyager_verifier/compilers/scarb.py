"""Scarb-backed compilers: one concrete type per scarb/cairo version pair.

Both compilers drive the ``scarb`` binary found on PATH (or SCARB_BINARY)
through a shared ScarbCli helper. Each one first checks that the installed
scarb reports the version it declares, so a project is never built with a
toolchain other than the one put on the wire at dispatch time.

Discovery flow:
    1. Read <project>/Scarb.toml.
    2. Package manifest: require [package] and [[target.starknet-contract]],
       return every .cairo file under src/, sorted.
       Workspace manifest: repeat for each listed member.
    3. Nothing found is an ArtifactDiscoveryError.
"""

from __future__ import annotations

import re
import subprocess
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING

from voyager_verifier.config import get_settings
from voyager_verifier.domain.enums import SupportedCairoVersions, SupportedScarbVersions
from voyager_verifier.domain.exceptions import (
    ArtifactDiscoveryError,
    CompilationError,
    UnsupportedToolchainError,
)
from voyager_verifier.logging_config import get_logger

if TYPE_CHECKING:
    from voyager_verifier.config import Settings

logger = get_logger(__name__)

MANIFEST_NAME = "Scarb.toml"

_VERSION_RE = re.compile(r"^scarb\s+(\d+\.\d+\.\d+)", re.MULTILINE)


def _as_text(output: str | bytes | None) -> str:
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return output


class ScarbCli:
    """Runs scarb commands for a single expected scarb version."""

    def __init__(self, expected_version: SupportedScarbVersions, settings: Settings | None = None) -> None:
        self.expected_version = expected_version
        self._settings = settings or get_settings()

    def _run(self, args: list[str], cwd: Path) -> subprocess.CompletedProcess[str]:
        cmd = [self._settings.scarb_binary, *args]
        try:
            return subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=self._settings.compile_timeout_seconds,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise CompilationError(
                f"{' '.join(cmd)} timed out after {self._settings.compile_timeout_seconds}s",
                stdout=_as_text(exc.stdout),
                stderr=_as_text(exc.stderr),
            ) from exc
        except OSError as exc:
            # cwd is checked by the caller, so an OSError here is about the binary
            raise CompilationError(
                f"Cannot run scarb binary {self._settings.scarb_binary!r}: {exc}"
            ) from exc

    def installed_version(self, cwd: Path) -> str | None:
        """Version reported by ``scarb --version``, or None if unparseable."""
        result = self._run(["--version"], cwd)
        match = _VERSION_RE.search(result.stdout)
        return match.group(1) if match else None

    def ensure_version(self, cwd: Path, cairo_version: SupportedCairoVersions) -> None:
        installed = self.installed_version(cwd)
        if installed != self.expected_version.value:
            logger.warning(
                "compiler.version_mismatch",
                expected=self.expected_version.value,
                installed=installed,
            )
            raise UnsupportedToolchainError(installed or "unknown", cairo_version.value)

    def build(self, project_root: Path) -> None:
        """Run ``scarb build`` in a project root.

        Raises:
            CompilationError: On a non-zero exit, with stdout/stderr attached.
        """
        logger.info("compiler.build.start", project=str(project_root))
        result = self._run(
            ["--manifest-path", str(project_root / MANIFEST_NAME), "build"],
            project_root,
        )
        if result.returncode != 0:
            logger.info(
                "compiler.build.failed",
                project=str(project_root),
                exit_code=result.returncode,
            )
            raise CompilationError(
                f"scarb build failed in {project_root} with exit code {result.returncode}",
                stdout=result.stdout,
                stderr=result.stderr,
                exit_code=result.returncode,
            )
        logger.info("compiler.build.passed", project=str(project_root))


def _load_manifest(project_path: Path) -> dict:
    manifest = project_path / MANIFEST_NAME
    if not manifest.is_file():
        raise ArtifactDiscoveryError(str(project_path), f"{MANIFEST_NAME} not found")
    try:
        return tomllib.loads(manifest.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ArtifactDiscoveryError(str(project_path), f"unreadable {MANIFEST_NAME}: {exc}") from exc


def _package_contracts(project_path: Path, manifest: dict) -> list[Path]:
    if "package" not in manifest:
        raise ArtifactDiscoveryError(str(project_path), "missing [package] table")
    if not manifest.get("target", {}).get("starknet-contract"):
        raise ArtifactDiscoveryError(
            str(project_path), "missing [[target.starknet-contract]] section"
        )
    src_dir = project_path / "src"
    return sorted(src_dir.rglob("*.cairo")) if src_dir.is_dir() else []


def discover_contracts(project_path: Path) -> list[Path]:
    """Candidate contract sources of a package or workspace.

    Raises:
        ArtifactDiscoveryError: If the layout is invalid or holds no sources.
    """
    project_path = Path(project_path)
    manifest = _load_manifest(project_path)

    workspace = manifest.get("workspace")
    if workspace is not None and "package" not in manifest:
        contracts: list[Path] = []
        for member in workspace.get("members", []):
            member_path = project_path / member
            contracts.extend(_package_contracts(member_path, _load_manifest(member_path)))
    else:
        contracts = _package_contracts(project_path, manifest)

    if not contracts:
        raise ArtifactDiscoveryError(str(project_path), "no .cairo sources under src/")
    return contracts


def find_project_root(file_path: Path) -> Path:
    """Nearest ancestor directory of a file that holds a Scarb.toml.

    Raises:
        ArtifactDiscoveryError: If the file is missing or no manifest is found.
    """
    file_path = Path(file_path)
    if not file_path.is_file():
        raise ArtifactDiscoveryError(str(file_path), "file does not exist")
    for parent in file_path.resolve().parents:
        if (parent / MANIFEST_NAME).is_file():
            return parent
    raise ArtifactDiscoveryError(str(file_path), f"no {MANIFEST_NAME} in any parent directory")


class _ScarbCompiler:
    """Build flow shared by every scarb version pair.

    Subclasses only declare SCARB_VERSION and CAIRO_VERSION.
    """

    SCARB_VERSION: SupportedScarbVersions
    CAIRO_VERSION: SupportedCairoVersions

    def __init__(self, settings: Settings | None = None) -> None:
        self._cli = ScarbCli(self.SCARB_VERSION, settings)

    def get_supported_scarb_versions(self) -> list[SupportedScarbVersions]:
        return [self.SCARB_VERSION]

    def get_supported_cairo_versions(self) -> list[SupportedCairoVersions]:
        return [self.CAIRO_VERSION]

    def get_contracts_to_verify_path(self, project_path: Path) -> list[Path]:
        return discover_contracts(project_path)

    def compile_project(self, project_path: Path) -> None:
        """Check the installed scarb version, then build the project.

        Raises:
            ArtifactDiscoveryError: If project_path is not a directory.
            UnsupportedToolchainError: If the installed scarb differs.
            CompilationError: If scarb cannot run or the build fails.
        """
        project_path = Path(project_path)
        if not project_path.is_dir():
            raise ArtifactDiscoveryError(str(project_path), "not a directory")
        self._cli.ensure_version(project_path, self.CAIRO_VERSION)
        self._cli.build(project_path)

    def compile_file(self, file_path: Path) -> None:
        self.compile_project(find_project_root(file_path))


class ScarbV250Compiler(_ScarbCompiler):
    """Compiler for scarb 2.5.0 / cairo 2.5.0 projects."""

    SCARB_VERSION = SupportedScarbVersions.V2_5_0
    CAIRO_VERSION = SupportedCairoVersions.V2_5_0


class ScarbV284Compiler(_ScarbCompiler):
    """Compiler for scarb 2.8.4 / cairo 2.8.4 projects."""

    SCARB_VERSION = SupportedScarbVersions.V2_8_4
    CAIRO_VERSION = SupportedCairoVersions.V2_8_4
