"""
Exception hierarchy for the triage service.

Each error carries the HTTP status and machine-readable code the API layer
uses to render it.
"""
from typing import Any, Dict, Optional

from fastapi import status


class MediTrackError(Exception):
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "INTERNAL_ERROR"
    user_message: str = "An error occurred"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.user_message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_code": self.error_code,
            "error_message": self.message,
            "error_details": self.details or None,
        }


class TriageInputError(MediTrackError, ValueError):
    """Malformed input reached the engine (wrong type or shape)"""
    http_status = status.HTTP_400_BAD_REQUEST
    error_code = "INVALID_INPUT"
    user_message = "Invalid symptom check input"


class AnalysisUnavailableError(MediTrackError):
    """Triage could not be computed; carries a conservative fallback result"""
    http_status = status.HTTP_503_SERVICE_UNAVAILABLE
    error_code = "ANALYSIS_UNAVAILABLE"
    user_message = "Symptom analysis is currently unavailable"

    def __init__(self, fallback, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.fallback = fallback


class NotFoundError(MediTrackError):
    http_status = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"
    user_message = "Resource not found"
