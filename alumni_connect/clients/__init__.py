"""API clients used by the state layer."""
from .request_service import HttpRequestService, RequestService, RequestServiceError

__all__ = ["HttpRequestService", "RequestService", "RequestServiceError"]
