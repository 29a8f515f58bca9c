"""
Prompt construction for template-based reports.
"""

from typing import Mapping, Optional

from openklaw.domain.chat import ChatMessage
from openklaw.templates.base import ReportTemplate


def build_report_prompt(
    template: ReportTemplate,
    field_values: Mapping[str, Optional[str]],
) -> str:
    """
    Build the user prompt for a template from the filled-in field values.

    Sections follow the template's field order. Fields that are missing or
    blank are left out entirely so the model never sees empty sections.

    Args:
        template: Report template
        field_values: Field id to user-entered value

    Returns:
        Prompt text
    """
    prompt = f"다음 정보를 바탕으로 {template.name}를 작성해주세요:\n\n"

    for template_field in template.fields:
        value = field_values.get(template_field.id)
        if value and value.strip():
            prompt += f"### {template_field.label}\n{value}\n\n"

    prompt += f"\n위 정보를 바탕으로 완성된 {template.name}를 작성해주세요."
    return prompt


def build_report_messages(
    template: ReportTemplate,
    field_values: Mapping[str, Optional[str]],
) -> list[ChatMessage]:
    """System instruction followed by the field-driven user prompt."""
    return [
        ChatMessage.system(template.system_prompt),
        ChatMessage.user(build_report_prompt(template, field_values)),
    ]
