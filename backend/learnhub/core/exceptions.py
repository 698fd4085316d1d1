# backend/learnhub/core/exceptions.py
"""Domain error taxonomy.

Services raise these; ``learnhub.main`` renders them as JSON with the
matching HTTP status so routes do not need to translate them.
"""
from typing import Any, Dict, Optional


class LearnHubError(Exception):
    """Base class for errors that reject a single request cleanly"""

    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"detail": self.message, "error": self.code}
        if self.details:
            body.update(self.details)
        return body


class ValidationError(LearnHubError):
    status_code = 400
    code = "validation_error"


class PermissionDeniedError(LearnHubError):
    status_code = 403
    code = "forbidden"


class NotFoundError(LearnHubError):
    status_code = 404
    code = "not_found"


class ConflictError(LearnHubError):
    status_code = 409
    code = "conflict"


class GatewayError(LearnHubError):
    status_code = 502
    code = "gateway_error"


class InfrastructureError(LearnHubError):
    status_code = 503
    code = "infrastructure_error"
