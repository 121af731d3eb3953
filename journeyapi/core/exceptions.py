from fastapi import HTTPException, status
from typing import Optional, Dict, Any


class BaseAPIException(HTTPException):
    """Base exception for API errors"""

    def __init__(
        self,
        status_code: int,
        error_code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.error_code = error_code
        self.message = message
        self.details = details or {}

        super().__init__(
            status_code=status_code,
            detail={
                "success": False,
                "error": {
                    "code": error_code,
                    "message": message,
                    "details": self.details,
                },
            },
        )

    def __str__(self) -> str:  # Ensure str(e) returns the human message
        return self.message


class AuthenticationError(BaseAPIException):
    """No current user, or the bearer token is invalid"""

    def __init__(
        self, message: str = "Authentication required", details: Optional[Dict] = None
    ):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code="AUTH_001",
            message=message,
            details=details,
        )


class ValidationError(BaseAPIException):
    def __init__(
        self, message: str = "Validation failed", details: Optional[Dict] = None
    ):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            error_code="VALIDATION_001",
            message=message,
            details=details,
        )


class NotFoundError(BaseAPIException):
    """Vendor, journey or user missing"""

    def __init__(
        self, message: str = "Resource not found", details: Optional[Dict] = None
    ):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="NOT_FOUND_001",
            message=message,
            details=details,
        )


class ConflictError(BaseAPIException):
    def __init__(
        self, message: str = "Resource conflict", details: Optional[Dict] = None
    ):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            error_code="CONFLICT_001",
            message=message,
            details=details,
        )


class InvalidProofError(BaseAPIException):
    """Scanned QR payload (or missing proof) does not prove presence; rescan"""

    def __init__(
        self, message: str = "Invalid check-in proof", details: Optional[Dict] = None
    ):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="CHECKIN_001",
            message=message,
            details=details,
        )


class TooFarError(BaseAPIException):
    """Location fix outside the proximity threshold.

    The caller may retry with a fresh fix or resend the request with
    ``force=True`` after the user confirms.
    """

    def __init__(self, distance_miles: float, threshold_miles: float):
        self.distance_miles = distance_miles
        self.threshold_miles = threshold_miles
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            error_code="CHECKIN_002",
            message=(
                f"You appear to be {distance_miles:.2f} miles from the vendor "
                f"(limit {threshold_miles} miles)"
            ),
            details={
                "distance_miles": round(distance_miles, 4),
                "threshold_miles": threshold_miles,
                "can_force": True,
            },
        )


class TransientBackendError(BaseAPIException):
    """Database/transaction failure; no automatic retry"""

    def __init__(
        self,
        message: str = "Temporary backend failure, please try again",
        details: Optional[Dict] = None,
    ):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            error_code="BACKEND_001",
            message=message,
            details=details,
        )


class InternalServerError(BaseAPIException):
    def __init__(
        self, message: str = "Internal server error", details: Optional[Dict] = None
    ):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="INTERNAL_001",
            message=message,
            details=details,
        )
