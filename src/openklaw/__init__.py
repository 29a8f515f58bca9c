"""OpenKlaw - template-driven business report generation on a local model."""

__version__ = "1.0.0"

from .core.exceptions import GenerationFailure, TemplateNotFoundError
from .domain.report import ReportResult
from .services.intent import is_report_request
from .services.report_service import ReportGenerator, generate_report
from .templates.registry import get_template, list_templates

__all__ = [
    "GenerationFailure",
    "ReportGenerator",
    "ReportResult",
    "TemplateNotFoundError",
    "generate_report",
    "get_template",
    "is_report_request",
    "list_templates",
]
