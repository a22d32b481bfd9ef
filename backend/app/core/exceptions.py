"""
Custom Exceptions for the SAP Technologies API
==============================================

Services raise these instead of HTTPException so the same code can run
outside a request. The handler registered in app.main turns every
SAPTechError into a JSON response using the class's status_code.

Usage:
    from app.core.exceptions import ResourceNotFoundError

    if not nomination:
        raise ResourceNotFoundError("Nomination", nomination_id)
"""

from typing import Optional, Any, Dict, List


class SAPTechError(Exception):
    """Base exception for all application errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "detail": self.message,
            "code": self.code,
            "details": self.details
        }


# ============================================
# Authentication & Authorization Errors
# ============================================

class AuthenticationError(SAPTechError):
    """User authentication failed"""

    status_code = 401

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, code="AUTH_FAILED")


class AuthorizationError(SAPTechError):
    """User not authorized for this action"""

    status_code = 403

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message, code="NOT_AUTHORIZED")


class AccountLockedError(AuthenticationError):
    """Too many failed logins"""

    status_code = 423

    def __init__(self, minutes_remaining: int):
        super().__init__(
            f"Account locked due to too many failed login attempts. "
            f"Try again in {minutes_remaining} minutes."
        )
        self.code = "ACCOUNT_LOCKED"
        self.details = {"minutes_remaining": minutes_remaining}


# ============================================
# Resource Errors (404-type)
# ============================================

class ResourceNotFoundError(SAPTechError):
    """Resource lookup failed"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: str = ""):
        message = (
            f"{resource_type} with ID '{resource_id}' not found"
            if resource_id else f"{resource_type} not found"
        )
        super().__init__(
            message,
            code=f"{resource_type.upper().replace(' ', '_')}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id}
        )


class ConflictError(SAPTechError):
    """Resource already exists"""

    status_code = 409

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="CONFLICT", details=details)


# ============================================
# Validation Errors (400-type)
# ============================================

class ValidationError(SAPTechError):
    """Input validation failed"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class FileUploadError(ValidationError):
    """Uploaded file rejected"""

    def __init__(self, message: str = "File upload failed"):
        super().__init__(message, field="file")
        self.code = "FILE_UPLOAD_ERROR"


class InvalidFileTypeError(FileUploadError):
    """File type not allowed"""

    def __init__(self, file_type: str, allowed_types: List[str]):
        super().__init__(
            f"File type '{file_type}' not allowed. Allowed: {', '.join(allowed_types)}"
        )
        self.code = "INVALID_FILE_TYPE"
        self.details = {"file_type": file_type, "allowed_types": allowed_types}


# ============================================
# Certificate Errors
# ============================================

class CertificateError(ValidationError):
    """Certificate request cannot be served"""

    def __init__(self, message: str):
        super().__init__(message)
        self.code = "CERTIFICATE_ERROR"


class CertificateGenerationError(SAPTechError):
    """PDF rendering or storage failed"""

    status_code = 500

    def __init__(self, message: str, certificate_id: Optional[str] = None):
        super().__init__(message, code="CERTIFICATE_GENERATION_FAILED")
        if certificate_id:
            self.details["certificate_id"] = certificate_id
