"""
Template registry - read-only catalog of report templates.
"""

from typing import Any, Optional

from openklaw.core.logging import get_logger
from openklaw.templates.base import ReportTemplate
from openklaw.templates.loader import TemplateLoader

logger = get_logger(__name__)


class TemplateRegistry:
    """
    Process-wide catalog of report templates.

    Filled once by ``initialize()`` and never mutated afterwards.
    """

    def __init__(self, loader: Optional[TemplateLoader] = None) -> None:
        """
        Initialize the template registry.

        Args:
            loader: TemplateLoader instance (creates one if not provided)
        """
        self.loader = loader or TemplateLoader()
        self._templates: tuple[ReportTemplate, ...] = ()
        self._by_id: dict[str, ReportTemplate] = {}
        self._initialized = False

    def initialize(self) -> None:
        """Load the catalog. Calling it again is a no-op."""
        if self._initialized:
            return

        templates = self.loader.load_all()
        self._templates = tuple(templates)
        self._by_id = {t.id: t for t in templates}
        self._initialized = True

        logger.info(
            "Template registry initialized",
            available_templates=len(self._templates),
        )

    def list_templates(self) -> tuple[ReportTemplate, ...]:
        """All templates in declared order."""
        self.initialize()
        return self._templates

    def get_template(self, template_id: str) -> Optional[ReportTemplate]:
        """
        Get a template by id.

        Args:
            template_id: Template id

        Returns:
            ReportTemplate, or None when the id is unknown
        """
        self.initialize()
        return self._by_id.get(template_id)

    def template_ids(self) -> list[str]:
        return [t.id for t in self.list_templates()]

    def get_template_info(self, template_id: str) -> Optional[dict[str, Any]]:
        """Display metadata for a template, or None."""
        template = self.get_template(template_id)
        if not template:
            return None
        return template.to_dict()


# Singleton instance
_registry: Optional[TemplateRegistry] = None


def get_template_registry() -> TemplateRegistry:
    """Get the global template registry instance."""
    global _registry
    if _registry is None:
        _registry = TemplateRegistry()
        _registry.initialize()
    return _registry


def list_templates() -> tuple[ReportTemplate, ...]:
    return get_template_registry().list_templates()


def get_template(template_id: str) -> Optional[ReportTemplate]:
    return get_template_registry().get_template(template_id)
