"""Error types raised while analyzing a route."""


class RouteAnalysisError(Exception):
    """Base class for all route analysis failures."""


class RouteValidationError(RouteAnalysisError):
    """The request is malformed or has too few coordinates."""


class ElevationProviderError(RouteAnalysisError):
    """A single elevation provider failed; the next one should be tried."""

    def __init__(self, provider: str, message: str, status_code: int | None = None):
        self.provider = provider
        self.status_code = status_code
        super().__init__(f"{provider}: {message}")


class ElevationAcquisitionError(RouteAnalysisError):
    """Every elevation provider failed or returned implausible data."""


class UpstreamAuthError(RouteAnalysisError):
    """The reasoning service credential is missing or was rejected."""


class UpstreamServiceError(RouteAnalysisError):
    """The reasoning service failed for a reason other than authentication."""
