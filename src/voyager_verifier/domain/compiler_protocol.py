"""Dynamic Compiler Protocol.

Defines the capability set every toolchain-version-specific compiler must
expose. This is a Protocol (structural subtyping) so concrete compilers
don't need to inherit from a base class, they just need to match the shape.

The dispatch/poll pipeline never looks inside a compiler: it only reads the
declared version sets and whether a build succeeded.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pathlib import Path

    from voyager_verifier.domain.enums import (
        SupportedCairoVersions,
        SupportedScarbVersions,
    )


@runtime_checkable
class DynamicCompiler(Protocol):
    """Protocol that all compiler implementations must satisfy.

    Concrete implementations:
        - compilers/scarb.py  (ScarbV250Compiler, ScarbV284Compiler)
    """

    def get_supported_scarb_versions(self) -> list[SupportedScarbVersions]:
        """Scarb build-system versions this compiler handles."""
        ...

    def get_supported_cairo_versions(self) -> list[SupportedCairoVersions]:
        """Cairo language versions this compiler handles."""
        ...

    def get_contracts_to_verify_path(self, project_path: Path) -> list[Path]:
        """Return the candidate contract sources under a project root.

        Raises:
            ArtifactDiscoveryError: If the project layout is invalid.
        """
        ...

    def compile_project(self, project_path: Path) -> None:
        """Compile an entire project in place.

        Raises:
            CompilationError: With the partial diagnostic output.
        """
        ...

    def compile_file(self, file_path: Path) -> None:
        """Compile the project a single file belongs to.

        Raises:
            CompilationError: With the partial diagnostic output.
        """
        ...


def supports_toolchain(
    compiler: DynamicCompiler,
    scarb_version: SupportedScarbVersions,
    cairo_version: SupportedCairoVersions,
) -> bool:
    """Whether a compiler declares support for a scarb/cairo version pair."""
    return (
        scarb_version in compiler.get_supported_scarb_versions()
        and cairo_version in compiler.get_supported_cairo_versions()
    )
