"""Dispatch Service: submits a class for verification and returns the job id.

Builds the multipart body from ProjectMetadataInfo plus the content of every
FileInfo, and posts it once to the public API. There is no retry at this
layer; a caller that wants one must wrap the call itself.

Response decision table for POST /class-verify/{class_hash}:
    200  -> job_id from {"job_id": str}      (other shape: ProtocolError)
    404  -> JobNotFoundError
    400  -> BadRequestError from {"error": str} (other shape: ProtocolError)
    else -> UnexpectedResponseError(status, body)

Also hosts the class existence check, an optional pre-check that dispatch
itself never calls.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError

from voyager_verifier.config import get_settings
from voyager_verifier.domain.enums import Network
from voyager_verifier.domain.exceptions import (
    BadRequestError,
    FileReadError,
    JobNotFoundError,
    ProtocolError,
    UnexpectedResponseError,
)
from voyager_verifier.infrastructure.api_client import (
    ApiEndpoints,
    VoyagerApiClient,
    parse_json,
)
from voyager_verifier.logging_config import get_logger
from voyager_verifier.schemas.job import ApiError, VerificationJobDispatch
from voyager_verifier.services.endpoint_resolver import (
    require_internal_api,
    require_public_api,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    import httpx

    from voyager_verifier.config import Settings
    from voyager_verifier.domain.submission import FileInfo, ProjectMetadataInfo

logger = get_logger(__name__)


class DispatchService:
    """Creates verification jobs on the remote service."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._transport = transport

    def dispatch_class_verification_job(
        self,
        network: Network,
        address: str,
        license: str,
        name: str,
        project_metadata: ProjectMetadataInfo,
        files: Iterable[FileInfo],
    ) -> str:
        """Submit a verification job and return its identifier.

        Every file is read before the request is sent, so a read failure
        aborts without any network call.

        Args:
            network: Which deployment to submit to.
            address: Class hash the sources are verified against.
            license: License identifier shown on the verified contract.
            name: Display name of the contract.
            project_metadata: Toolchain versions and bundle layout.
            files: Source files to include.

        Returns:
            The opaque job id.

        Raises:
            ConfigurationError: Custom network without a public endpoint.
            FileReadError: A source file could not be read.
            TransportError: The request did not complete.
            JobNotFoundError: The service answered 404.
            BadRequestError: The service answered 400 with a message.
            ProtocolError: Any other status, or a body of the wrong shape.
        """
        public_url = require_public_api(network, self._settings)
        fields = build_form_fields(license, name, project_metadata, files)

        logger.info(
            "dispatch.submitting",
            network=str(network),
            address=address,
            name=name,
            compiler_version=str(project_metadata.cairo_version),
            scarb_version=str(project_metadata.scarb_version),
            file_count=len(fields) - len(_METADATA_FIELDS),
        )

        with VoyagerApiClient(public_url, self._settings, self._transport) as client:
            response = client.post_multipart(ApiEndpoints.VERIFY_CLASS, address, fields)

        if response.status_code == 200:
            try:
                job_id = VerificationJobDispatch.model_validate(parse_json(response)).job_id
            except ValidationError as exc:
                raise ProtocolError(
                    f"Unexpected dispatch response shape: {response.text[:200]}"
                ) from exc
            logger.info("dispatch.accepted", network=str(network), address=address, job_id=job_id)
            return job_id

        if response.status_code == 404:
            logger.warning("dispatch.not_found", network=str(network), address=address)
            raise JobNotFoundError(address)

        if response.status_code == 400:
            try:
                api_error = ApiError.model_validate(parse_json(response))
            except ValidationError as exc:
                raise UnexpectedResponseError(
                    "Failed to dispatch verification job", 400, response.text
                ) from exc
            logger.warning(
                "dispatch.rejected", network=str(network), address=address, error=api_error.error
            )
            raise BadRequestError(api_error.error)

        logger.error(
            "dispatch.unexpected_status",
            network=str(network),
            address=address,
            status=response.status_code,
        )
        raise UnexpectedResponseError(
            "Failed to dispatch verification job", response.status_code, response.text
        )

    def does_class_exist(self, network: Network, class_hash: str) -> bool:
        """Check whether the service knows a class hash.

        Returns:
            True on 200, False on 404.

        Raises:
            UnexpectedResponseError: For any other status.
        """
        internal_url = require_internal_api(network, self._settings)
        with VoyagerApiClient(internal_url, self._settings, self._transport) as client:
            response = client.get(ApiEndpoints.GET_CLASS, class_hash)

        if response.status_code == 200:
            return True
        if response.status_code == 404:
            return False
        raise UnexpectedResponseError(
            f"Unexpected response when looking up class {class_hash}",
            response.status_code,
            response.text,
        )


_METADATA_FIELDS = (
    "compiler_version",
    "scarb_version",
    "license",
    "name",
    "contract_file",
    "project_dir_path",
)


def build_form_fields(
    license: str,
    name: str,
    project_metadata: ProjectMetadataInfo,
    files: Iterable[FileInfo],
) -> list[tuple[str, str]]:
    """Build the ordered (field, text) pairs of the dispatch body.

    Raises:
        FileReadError: If any file cannot be read as text.
    """
    fields = [
        ("compiler_version", str(project_metadata.cairo_version)),
        ("scarb_version", str(project_metadata.scarb_version)),
        ("license", license),
        ("name", name),
        ("contract_file", project_metadata.contract_file),
        ("project_dir_path", project_metadata.project_dir_path),
    ]
    for file in files:
        try:
            content = Path(file.path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise FileReadError(str(file.path), str(exc)) from exc
        fields.append((file.field_name, content))
    return fields
