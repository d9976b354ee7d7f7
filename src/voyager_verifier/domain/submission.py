"""Value objects describing what gets submitted for verification.

The set of FileInfo entries plus one ProjectMetadataInfo fully determines the
multipart body sent on dispatch.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from voyager_verifier.domain.enums import (
    SupportedCairoVersions,
    SupportedScarbVersions,
)


@dataclass(frozen=True)
class ProjectMetadataInfo:
    """Toolchain and layout of the project being verified.

    Attributes:
        cairo_version: Compiler version tag, sent as ``compiler_version``.
        scarb_version: Build-system version tag, sent as ``scarb_version``.
        project_dir_path: Project directory, relative to the bundle root.
        contract_file: Path of the primary contract file within the bundle.
    """

    cairo_version: SupportedCairoVersions
    scarb_version: SupportedScarbVersions
    project_dir_path: str
    contract_file: str


@dataclass(frozen=True)
class FileInfo:
    """One source file included in the submission.

    Attributes:
        name: Logical name; the form field is ``files__<name>``.
        path: Where to read the file's content from at dispatch time.
    """

    name: str
    path: Path

    @property
    def field_name(self) -> str:
        return f"files__{self.name}"
