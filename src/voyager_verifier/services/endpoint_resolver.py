"""Endpoint resolution: maps a Network to its (internal, public) API roots.

Mainnet, Sepolia and Local are hardcoded. Custom is read from settings
(CUSTOM_INTERNAL_API_ENDPOINT_URL / CUSTOM_PUBLIC_API_ENDPOINT_URL) and
resolves to empty strings when unset; get_network_api never raises, the
require_* helpers turn an empty slot into a ConfigurationError.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from voyager_verifier.config import get_settings
from voyager_verifier.domain.enums import Network
from voyager_verifier.domain.exceptions import ConfigurationError

if TYPE_CHECKING:
    from voyager_verifier.config import Settings

# network -> (internal API, public API)
NETWORK_APIS: dict[Network, tuple[str, str]] = {
    Network.MAINNET: ("https://voyager.online", "https://api.voyager.online/beta"),
    Network.SEPOLIA: (
        "https://sepolia.voyager.online",
        "https://sepolia-api.voyager.online/beta",
    ),
    Network.LOCAL: ("http://localhost:8899", "http://localhost:30380"),
}


def get_network_api(network: Network, settings: Settings | None = None) -> tuple[str, str]:
    """Return the (internal_url, public_url) pair for a network."""
    network = Network(network)
    if network is Network.CUSTOM:
        settings = settings or get_settings()
        return (
            settings.custom_internal_api_endpoint_url,
            settings.custom_public_api_endpoint_url,
        )
    return NETWORK_APIS[network]


def require_internal_api(network: Network, settings: Settings | None = None) -> str:
    """Internal API root for a network, rejecting an unconfigured Custom slot."""
    internal_url, _ = get_network_api(network, settings)
    if not internal_url:
        raise ConfigurationError(
            f"No internal API endpoint configured for network '{network}'. "
            "Set CUSTOM_INTERNAL_API_ENDPOINT_URL."
        )
    return internal_url


def require_public_api(network: Network, settings: Settings | None = None) -> str:
    """Public API root for a network, rejecting an unconfigured Custom slot."""
    _, public_url = get_network_api(network, settings)
    if not public_url:
        raise ConfigurationError(
            f"No public API endpoint configured for network '{network}'. "
            "Set CUSTOM_PUBLIC_API_ENDPOINT_URL."
        )
    return public_url
