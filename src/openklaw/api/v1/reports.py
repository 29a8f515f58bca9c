"""
Report template and generation endpoints.
"""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from openklaw.api.deps import get_registry, get_report_generator, get_stats_store
from openklaw.core.exceptions import TemplateNotFoundError
from openklaw.core.logging import get_logger
from openklaw.domain.report import ReportResult
from openklaw.services.intent import is_report_request
from openklaw.services.report_service import ReportGenerator
from openklaw.stores.stats_store import StatsStore
from openklaw.templates.registry import TemplateRegistry

logger = get_logger(__name__)

router = APIRouter()


class TemplateListResponse(BaseModel):
    templates: list[dict[str, Any]]
    total: int


class GenerateReportRequest(BaseModel):
    """Request to generate a report."""

    template_id: str
    field_values: dict[str, str] = Field(default_factory=dict)


class IntentRequest(BaseModel):
    text: str


class IntentResponse(BaseModel):
    is_report_request: bool


@router.get("/templates", response_model=TemplateListResponse)
async def list_templates(
    registry: TemplateRegistry = Depends(get_registry),
) -> TemplateListResponse:
    """List report templates in display order."""
    templates = [t.to_dict() for t in registry.list_templates()]
    return TemplateListResponse(templates=templates, total=len(templates))


@router.get("/templates/{template_id}")
async def get_template(
    template_id: str,
    registry: TemplateRegistry = Depends(get_registry),
) -> dict[str, Any]:
    """Get one template's display metadata and fields."""
    info = registry.get_template_info(template_id)
    if info is None:
        raise TemplateNotFoundError(template_id)
    return info


@router.post("/reports", response_model=ReportResult)
async def generate_report(
    request: GenerateReportRequest,
    generator: ReportGenerator = Depends(get_report_generator),
    stats: StatsStore = Depends(get_stats_store),
) -> ReportResult:
    """
    Generate a report. Waits for the whole stream; failures surface as
    error responses and never as a partial document.
    """
    result = await generator.generate_report(request.template_id, request.field_values)
    stats.increment_messages()
    return result


@router.post("/intent", response_model=IntentResponse)
async def detect_intent(request: IntentRequest) -> IntentResponse:
    """Tell the chat UI whether to offer the template picker."""
    return IntentResponse(is_report_request=is_report_request(request.text))
