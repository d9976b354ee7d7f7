"""Application services: endpoint resolution, job dispatch and job polling."""

from voyager_verifier.services.dispatch_service import DispatchService
from voyager_verifier.services.endpoint_resolver import get_network_api
from voyager_verifier.services.polling_service import PollingService

__all__ = ["DispatchService", "PollingService", "get_network_api"]
