"""Report template catalog."""

from .base import ReportTemplate, TemplateField
from .loader import TemplateLoader
from .registry import TemplateRegistry, get_template_registry

__all__ = [
    "ReportTemplate",
    "TemplateField",
    "TemplateLoader",
    "TemplateRegistry",
    "get_template_registry",
]
