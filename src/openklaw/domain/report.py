"""
Report domain model.
"""

from pydantic import BaseModel, ConfigDict, Field


class ReportResult(BaseModel):
    """A finished report. Only ever built from a fully completed stream."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(..., description="Display title, '{template name} - {identifier}'")
    content: str = Field(..., description="Generated document body (Markdown)")
    template: str = Field(..., description="Id of the originating template")
