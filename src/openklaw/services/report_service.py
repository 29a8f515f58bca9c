"""
Report generation service.
Resolves a template, builds the prompt, streams the completion and
packages the finished document.
"""

from datetime import date
from typing import Callable, Mapping, Optional

from openklaw.core.config import settings
from openklaw.core.constants import DEFAULT_REPORT_TEMPERATURE
from openklaw.core.exceptions import TemplateNotFoundError
from openklaw.core.logging import LogContext, get_logger
from openklaw.domain.report import ReportResult
from openklaw.llm.ollama_client import ChatCompletionService, OllamaClient
from openklaw.llm.streaming import CompletionStreamConsumer, ContentCallback
from openklaw.reports.prompt import build_report_messages
from openklaw.templates.base import ReportTemplate
from openklaw.templates.registry import TemplateRegistry, get_template_registry

logger = get_logger(__name__)


def format_locale_date(value: date, locale: str) -> str:
    """
    Format a date the way the user's locale writes short dates.

    ``ko`` gives "2024. 1. 15.", ``en`` gives "1/15/2024".
    """
    if locale == "en":
        return f"{value.month}/{value.day}/{value.year}"
    return f"{value.year}. {value.month}. {value.day}."


class ReportGenerator:
    """
    Generates template-based business reports.

    Each call is independent: no caching, no deduplication, no retry.
    """

    def __init__(
        self,
        registry: TemplateRegistry,
        consumer: CompletionStreamConsumer,
        model: Optional[str] = None,
        temperature: float = DEFAULT_REPORT_TEMPERATURE,
        locale: Optional[str] = None,
        clock: Optional[Callable[[], date]] = None,
    ) -> None:
        """
        Initialize the report generator.

        Args:
            registry: Template registry
            consumer: Completion stream consumer
            model: Model id (defaults to the configured Ollama model)
            temperature: Sampling temperature
            locale: Locale for the date fallback in titles
            clock: Returns today's date (used by tests)
        """
        self.registry = registry
        self.consumer = consumer
        self.model = model or settings.ollama.model
        self.temperature = temperature
        self.locale = locale or settings.report.locale
        self._clock = clock or date.today

    def build_title(self, template: ReportTemplate, field_values: Mapping[str, str]) -> str:
        """
        "{template name} - {identifier}".

        The identifier is the ``title`` field, else ``period``, else today.
        """
        identifier = (
            field_values.get("title")
            or field_values.get("period")
            or format_locale_date(self._clock(), self.locale)
        )
        return f"{template.name} - {identifier}"

    async def generate_report(
        self,
        template_id: str,
        field_values: Mapping[str, str],
        on_content: Optional[ContentCallback] = None,
    ) -> ReportResult:
        """
        Generate a report from a template and filled-in fields.

        Args:
            template_id: Template id
            field_values: Field id to value; required flags are not enforced
            on_content: Optional progress callback for streamed deltas

        Returns:
            ReportResult with the complete document

        Raises:
            TemplateNotFoundError: If the template id is unknown
            GenerationFailure: If the completion stream fails
        """
        template = self.registry.get_template(template_id)
        if template is None:
            logger.warning("Unknown report template", template_id=template_id)
            raise TemplateNotFoundError(template_id)

        messages = build_report_messages(template, field_values)

        with LogContext(template_id=template_id, model=self.model):
            logger.info(
                "Generating report",
                fields=[k for k, v in field_values.items() if v and v.strip()],
            )

            content = await self.consumer.consume(
                self.model,
                messages,
                {"temperature": self.temperature},
                on_content=on_content,
            )

            result = ReportResult(
                title=self.build_title(template, field_values),
                content=content,
                template=template.id,
            )

            logger.info(
                "Report generated",
                title=result.title,
                content_length=len(content),
            )

        return result


async def generate_report(
    template_id: str,
    field_values: Mapping[str, str],
    service: Optional[ChatCompletionService] = None,
    model: Optional[str] = None,
) -> ReportResult:
    """
    One-shot report generation against the global registry.

    Without ``service`` a temporary Ollama client is opened and closed.
    """
    registry = get_template_registry()

    if service is not None:
        generator = ReportGenerator(registry, CompletionStreamConsumer(service), model=model)
        return await generator.generate_report(template_id, field_values)

    async with OllamaClient() as client:
        generator = ReportGenerator(registry, CompletionStreamConsumer(client), model=model)
        return await generator.generate_report(template_id, field_values)
