"""
Template loader - reads the YAML report template catalog.
"""

from pathlib import Path
from typing import Any, Optional

import yaml

from openklaw.core.config import settings
from openklaw.core.constants import FieldType
from openklaw.core.exceptions import ConfigurationError
from openklaw.core.logging import get_logger
from openklaw.templates.base import ReportTemplate, TemplateField

logger = get_logger(__name__)

BUNDLED_CATALOG = Path(__file__).parent / "definitions" / "report_templates.yaml"


class TemplateLoader:
    """
    Loads report templates from a YAML catalog.

    The catalog is a mapping with a ``templates`` list; list order is kept.
    """

    def __init__(self, catalog_path: Optional[str] = None) -> None:
        """
        Initialize the template loader.

        Args:
            catalog_path: Path to a YAML catalog (defaults to the bundled one)
        """
        self.catalog_path = Path(catalog_path or settings.templates_file or BUNDLED_CATALOG)

    def _load_yaml(self) -> dict[str, Any]:
        try:
            with open(self.catalog_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigurationError(
                f"Cannot read template catalog: {e}",
                details={"path": str(self.catalog_path)},
            ) from e
        except yaml.YAMLError as e:
            logger.error(
                "Failed to parse template catalog",
                path=str(self.catalog_path),
                error=str(e),
            )
            raise ConfigurationError(
                "Template catalog is not valid YAML",
                details={"path": str(self.catalog_path)},
            ) from e

        if not isinstance(data, dict) or not isinstance(data.get("templates"), list):
            raise ConfigurationError(
                "Template catalog must contain a 'templates' list",
                details={"path": str(self.catalog_path)},
            )
        return data

    def _parse_field(self, data: dict[str, Any]) -> TemplateField:
        try:
            field_type = FieldType(data.get("type", FieldType.TEXT.value))
        except ValueError as e:
            raise ConfigurationError(
                f"Unknown field type '{data.get('type')}'",
                details={"field": data.get("id")},
            ) from e

        return TemplateField(
            id=str(data.get("id", "")),
            label=str(data.get("label", "")),
            type=field_type,
            placeholder=data.get("placeholder"),
            required=bool(data.get("required", False)),
            options=tuple(data.get("options") or ()),
        )

    def _parse_template(self, data: dict[str, Any]) -> ReportTemplate:
        return ReportTemplate(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            icon=str(data.get("icon", "")),
            description=str(data.get("description", "")),
            fields=tuple(self._parse_field(f) for f in data.get("fields") or []),
            system_prompt=str(data.get("system_prompt", "")),
        )

    def load_all(self) -> list[ReportTemplate]:
        """
        Load and validate every template in the catalog.

        Returns:
            Templates in catalog order

        Raises:
            ConfigurationError: If the catalog is unreadable or a template is invalid
        """
        data = self._load_yaml()

        templates: list[ReportTemplate] = []
        seen: set[str] = set()

        for raw in data["templates"]:
            template = self._parse_template(raw)

            errors = template.validate()
            if errors:
                raise ConfigurationError(
                    f"Invalid template '{template.id}'",
                    details={"errors": errors},
                )

            if template.id in seen:
                raise ConfigurationError(
                    f"Duplicate template id '{template.id}'",
                    details={"template_id": template.id},
                )

            seen.add(template.id)
            templates.append(template)

        logger.debug(
            "Loaded template catalog",
            path=str(self.catalog_path),
            templates=len(templates),
        )

        return templates
