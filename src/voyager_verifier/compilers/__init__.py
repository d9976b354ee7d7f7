"""Compiler implementations and factory.

Two toolchain pairs:
    - ScarbV250Compiler:  scarb 2.5.0 / cairo 2.5.0
    - ScarbV284Compiler:  scarb 2.8.4 / cairo 2.8.4

The CompilerFactory picks the compiler registered for the scarb/cairo pair
declared in a project's ProjectMetadataInfo.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from voyager_verifier.compilers.scarb import ScarbV250Compiler, ScarbV284Compiler
from voyager_verifier.domain.compiler_protocol import DynamicCompiler
from voyager_verifier.domain.enums import SupportedCairoVersions, SupportedScarbVersions
from voyager_verifier.domain.exceptions import UnsupportedToolchainError

if TYPE_CHECKING:
    from voyager_verifier.config import Settings


class CompilerFactory:
    """Factory that creates the compiler for a scarb/cairo version pair.

    Usage:
        compiler = CompilerFactory.create("2.8.4", "2.8.4")
        compiler.compile_project(project_path)
    """

    _registry: dict[
        tuple[SupportedScarbVersions, SupportedCairoVersions], type[DynamicCompiler]
    ] = {
        (SupportedScarbVersions.V2_5_0, SupportedCairoVersions.V2_5_0): ScarbV250Compiler,
        (SupportedScarbVersions.V2_8_4, SupportedCairoVersions.V2_8_4): ScarbV284Compiler,
    }

    @classmethod
    def create(
        cls,
        scarb_version: str,
        cairo_version: str,
        settings: Settings | None = None,
    ) -> DynamicCompiler:
        """Create a compiler instance for a version pair.

        Args:
            scarb_version: Scarb version tag, e.g. "2.8.4".
            cairo_version: Cairo version tag, e.g. "2.8.4".
            settings: Optional settings override (binary path, timeout).

        Returns:
            A compiler that satisfies the DynamicCompiler protocol.

        Raises:
            UnsupportedToolchainError: If no compiler handles the pair.
        """
        try:
            key = (SupportedScarbVersions(scarb_version), SupportedCairoVersions(cairo_version))
        except ValueError:
            key = None

        compiler_class = cls._registry.get(key) if key else None
        if compiler_class is None:
            raise UnsupportedToolchainError(str(scarb_version), str(cairo_version))
        return compiler_class(settings)

    @classmethod
    def get_supported_pairs(cls) -> list[tuple[str, str]]:
        """Return the supported (scarb, cairo) version tag pairs."""
        return [(scarb.value, cairo.value) for scarb, cairo in cls._registry]


__all__ = [
    "CompilerFactory",
    "ScarbV250Compiler",
    "ScarbV284Compiler",
]
