"""Shared type aliases for reliance analyses and history entries."""
from typing import Literal, Optional, TypedDict

SignalType = Literal["safe", "unclear", "caution"]
ContentType = Literal["text", "url", "image", "document"]
ReasoningCategory = Literal["coherence", "constraints", "continuity", "context-density", "uncertainty"]

CONTENT_TYPES: tuple[str, ...] = ("text", "url", "image", "document")
REASONING_CATEGORIES: tuple[str, ...] = (
    "coherence",
    "constraints",
    "continuity",
    "context-density",
    "uncertainty",
)


class ReasoningPoint(TypedDict):
    category: ReasoningCategory
    text: str


class RelianceAnalysis(TypedDict):
    signal: SignalType
    signal_label: str
    reasoning: list[ReasoningPoint]
    safe_actions: list[str]
    avoid_actions: list[str]
    delay_reduces_risk: bool
    uncertainty_disclosure: str


class HistoryEntry(RelianceAnalysis):
    analysis_id: str
    created_at: str
    content: str
    content_type: ContentType
    content_hash: str
    file_url: Optional[str]
    file_name: Optional[str]
    mode: str
    model_name: str
