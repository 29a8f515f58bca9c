"""
Report template and template field definitions.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from openklaw.core.constants import FieldType


@dataclass(frozen=True)
class TemplateField:
    """
    One user-supplied input slot of a report template.

    ``required`` is advisory: it drives the form UI and nothing else.
    """

    id: str
    label: str
    type: FieldType
    placeholder: Optional[str] = None
    required: bool = False
    options: tuple[str, ...] = field(default_factory=tuple)

    def validate(self) -> list[str]:
        """
        Validate the field definition.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not self.id:
            errors.append("Field id is required")

        if not self.label:
            errors.append(f"Field '{self.id}' has no label")

        if self.type == FieldType.SELECT and not self.options:
            errors.append(f"Select field '{self.id}' must declare options")

        return errors

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "label": self.label,
            "type": self.type.value,
            "required": self.required,
        }
        if self.placeholder is not None:
            data["placeholder"] = self.placeholder
        if self.type == FieldType.SELECT:
            data["options"] = list(self.options)
        return data


@dataclass(frozen=True)
class ReportTemplate:
    """
    A named document blueprint: display metadata, an ordered field schema
    and the system instruction sent to the model.

    Field order is the order sections appear in the generated prompt.
    """

    id: str
    name: str
    icon: str
    description: str
    fields: tuple[TemplateField, ...]
    system_prompt: str

    @property
    def field_ids(self) -> list[str]:
        return [f.id for f in self.fields]

    @property
    def required_fields(self) -> list[TemplateField]:
        return [f for f in self.fields if f.required]

    def get_field(self, field_id: str) -> Optional[TemplateField]:
        for template_field in self.fields:
            if template_field.id == field_id:
                return template_field
        return None

    def validate(self) -> list[str]:
        """
        Validate the template and all of its fields.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not self.id:
            errors.append("Template id is required")

        if not self.name:
            errors.append(f"Template '{self.id}' has no name")

        if not self.system_prompt:
            errors.append(f"Template '{self.id}' has no system prompt")

        if not self.fields:
            errors.append(f"Template '{self.id}' declares no fields")

        seen: set[str] = set()
        for template_field in self.fields:
            if template_field.id in seen:
                errors.append(f"Template '{self.id}' repeats field id '{template_field.id}'")
            seen.add(template_field.id)
            errors.extend(template_field.validate())

        return errors

    def to_dict(self) -> dict[str, Any]:
        """Display form used by the API and the template picker."""
        return {
            "id": self.id,
            "name": self.name,
            "icon": self.icon,
            "description": self.description,
            "fields": [f.to_dict() for f in self.fields],
        }
