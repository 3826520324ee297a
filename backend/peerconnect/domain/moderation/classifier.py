"""HTTP client for an OpenAI-compatible chat completion classifier."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from peerconnect.domain.errors import UpstreamUnavailable
from peerconnect.domain.moderation.models import AI_ALLOW_REASON, AI_REJECT_REASON, ModerationVerdict

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a strict moderation system. Only allow posts related to academics, study, exams, "
    "notes, assignments, classes, or university topics. Reject anything unrelated like food, "
    "dating, sports, politics, or entertainment. Respond with either 'ALLOW' or 'REJECT'."
)


class ContentClassifier(Protocol):
    """Interface for the external content classifier."""

    async def classify(self, content: str) -> ModerationVerdict:
        ...


def parse_decision(text: str) -> bool:
    """Map the model's free-text answer onto allow/reject; reject wins ties."""
    decision = (text or "").strip().lower()
    allowed = False
    if "allow" in decision:
        allowed = True
    if "reject" in decision:
        allowed = False
    return allowed


@dataclass
class OpenAIClassifier(ContentClassifier):
    """Classifier backed by ``POST {base_url}/chat/completions``."""

    http: httpx.AsyncClient
    api_key: str | None
    base_url: str = "https://api.openai.com/v1"
    model: str = "gpt-4o-mini"
    request_timeout: float = 5.0

    async def classify(self, content: str) -> ModerationVerdict:
        if not self.api_key:
            raise UpstreamUnavailable("classifier_not_configured")
        body = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": content},
            ],
            "max_tokens": 20,
        }
        try:
            response = await self.http.post(
                f"{self.base_url.rstrip('/')}/chat/completions",
                json=body,
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.request_timeout,
            )
            response.raise_for_status()
            answer = response.json()["choices"][0]["message"]["content"]
        except (httpx.HTTPError, KeyError, IndexError, TypeError, ValueError) as exc:
            logger.warning("classifier_unavailable", extra={"error": type(exc).__name__})
            raise UpstreamUnavailable("classifier_unavailable") from exc

        allowed = parse_decision(answer)
        return ModerationVerdict(
            allowed=allowed,
            reason=AI_ALLOW_REASON if allowed else AI_REJECT_REASON,
            source="classifier",
            categories=[] if allowed else ["off_topic"],
        )
