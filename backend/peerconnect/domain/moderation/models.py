"""Moderation verdicts shared by the keyword gate and the classifier."""

from __future__ import annotations

from dataclasses import dataclass, field

KEYWORD_REJECT_REASON = "Off-topic keyword detected (not school related)"
AI_ALLOW_REASON = "Allowed by AI moderation"
AI_REJECT_REASON = "Rejected by AI moderation"
FALLBACK_REASON = "AI unavailable, used fallback filter"


@dataclass(frozen=True)
class ModerationVerdict:
    """Outcome of screening one piece of content."""

    allowed: bool
    reason: str
    source: str
    categories: list[str] = field(default_factory=list)
