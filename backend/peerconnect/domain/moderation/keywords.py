"""Keyword gate applied before any classifier call."""

from __future__ import annotations

from typing import Iterable

from peerconnect.domain.moderation.models import KEYWORD_REJECT_REASON, ModerationVerdict


class KeywordGate:
    """Rejects content containing any banned term (case-insensitive substring)."""

    def __init__(self, banned: Iterable[str]) -> None:
        self.banned: tuple[str, ...] = tuple(sorted({word.strip().lower() for word in banned if word.strip()}))

    def matches(self, text: str) -> list[str]:
        lowered = (text or "").lower()
        return [word for word in self.banned if word in lowered]

    def check(self, text: str) -> ModerationVerdict:
        hits = self.matches(text)
        if hits:
            return ModerationVerdict(allowed=False, reason=KEYWORD_REJECT_REASON, source="keyword", categories=hits)
        return ModerationVerdict(allowed=True, reason="No banned keywords", source="keyword")
