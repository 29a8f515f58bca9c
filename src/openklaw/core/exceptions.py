"""
Exception hierarchy for OpenKlaw.
Every error carries a code and the HTTP status used when it reaches the API.
"""

from typing import Any, Optional


class OpenKlawError(Exception):
    """Base exception for all OpenKlaw errors."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[dict[str, Any]] = None,
        status_code: int = 500,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
            }
        }


# =============================================================================
# Configuration Errors (500)
# =============================================================================


class ConfigurationError(OpenKlawError):
    """Error in application configuration or bundled data."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(
            message=message,
            code="CONFIGURATION_ERROR",
            details=details,
            status_code=500,
        )


# =============================================================================
# Not Found Errors (404)
# =============================================================================


class NotFoundError(OpenKlawError):
    """Requested resource not found."""

    def __init__(
        self,
        resource_type: str,
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
    ) -> None:
        msg = message or f"{resource_type} not found"
        if resource_id and not message:
            msg = f"{resource_type} with ID '{resource_id}' not found"

        super().__init__(
            message=msg,
            code="NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id},
            status_code=404,
        )


class TemplateNotFoundError(NotFoundError):
    """Unknown report template id. Recoverable; shown to the user as is."""

    def __init__(self, template_id: str) -> None:
        super().__init__(
            resource_type="Template",
            resource_id=template_id,
            message=f"템플릿을 찾을 수 없습니다: {template_id}",
        )
        self.code = "TEMPLATE_NOT_FOUND"
        self.template_id = template_id


# =============================================================================
# External Service Errors (502)
# =============================================================================


class ExternalServiceError(OpenKlawError):
    """Error communicating with external service."""

    def __init__(
        self,
        service_name: str,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=f"{service_name} error: {message}",
            code="EXTERNAL_SERVICE_ERROR",
            details={"service": service_name, **(details or {})},
            status_code=502,
        )


class CompletionServiceError(ExternalServiceError):
    """Error talking to the chat completion backend."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(service_name="Ollama", message=message, details=details)
        self.code = "COMPLETION_SERVICE_ERROR"


class GenerationFailure(ExternalServiceError):
    """
    The completion stream errored or was interrupted before it finished.

    The content received before the failure is kept on ``partial_content``
    for diagnostics. It is never handed out as a finished document.
    """

    def __init__(self, message: str, partial_content: str = "") -> None:
        super().__init__(
            service_name="Generation",
            message=message,
            details={"partial_length": len(partial_content)},
        )
        self.code = "GENERATION_FAILED"
        self.partial_content = partial_content
