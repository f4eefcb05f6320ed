"""
Error taxonomy for the region overlap service.

Each error knows the HTTP status it maps to at the route boundary. Geometry
failures are NOT exceptions here - they travel as GeometryResult/PartReport
values (see geometry_kernel.py and overlap_aggregator.py).
"""

from typing import Any, Dict, Optional


class OverlapAnalysisError(Exception):
    """Base class for errors surfaced to API callers."""

    http_status: int = 500

    def __init__(self, message: str, detail: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_dict(self) -> Dict[str, Any]:
        """JSON body for the error response."""
        body: Dict[str, Any] = {"error": self.message}
        if self.detail is not None:
            body["detail"] = self.detail
        return body


class ValidationError(OverlapAnalysisError):
    """Request payload rejected before any geometry work."""

    http_status = 400


class DependencyMissingError(OverlapAnalysisError):
    """No boundary dataset available for any requested level."""

    http_status = 500


class UpstreamFailureError(OverlapAnalysisError):
    """Remote boundary index answered with a non-success status."""

    http_status = 502

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__("Overpass error", detail=body)
        self.status_code = status_code
