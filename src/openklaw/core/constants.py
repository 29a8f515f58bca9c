"""
System-wide constants for OpenKlaw.
"""

from enum import Enum


# =============================================================================
# Enums
# =============================================================================


class MessageRole(str, Enum):
    """Message roles in a chat completion request."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class FieldType(str, Enum):
    """Input widget types a template field may declare."""

    TEXT = "text"
    TEXTAREA = "textarea"
    DATE = "date"
    SELECT = "select"


class Theme(str, Enum):
    """UI theme preference."""

    DARK = "dark"
    LIGHT = "light"
    SYSTEM = "system"


# =============================================================================
# API
# =============================================================================

API_PREFIX = "/api/v1"


# =============================================================================
# Report generation
# =============================================================================

DEFAULT_REPORT_TEMPERATURE = 0.7

# Substrings that mark free-form input as a report request
REPORT_KEYWORDS = (
    "보고서",
    "회의록",
    "제안서",
    "인수인계",
    "현황",
    "주간보고",
    "월간보고",
    "일일보고",
    "report",
    "작성해",
    "써줘",
)


# =============================================================================
# Preferences
# =============================================================================

AVAILABLE_MODELS = [
    {"id": "qwen2.5:3b-instruct", "name": "Qwen 2.5 3B (권장)", "size": "~2GB"},
    {"id": "qwen2.5:7b-instruct", "name": "Qwen 2.5 7B", "size": "~4.5GB"},
    {"id": "llama3.2:3b", "name": "Llama 3.2 3B", "size": "~2GB"},
    {"id": "gemma2:2b", "name": "Gemma 2 2B", "size": "~1.6GB"},
    {"id": "phi3:mini", "name": "Phi-3 Mini", "size": "~2.3GB"},
    {"id": "mistral:7b", "name": "Mistral 7B", "size": "~4.1GB"},
]
