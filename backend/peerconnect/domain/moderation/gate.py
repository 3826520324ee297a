"""Moderation gate: keyword screen first, classifier second, keyword fallback."""

from __future__ import annotations

import logging
from typing import Optional

from peerconnect.domain.errors import ModerationRejected, UpstreamUnavailable
from peerconnect.domain.moderation.classifier import ContentClassifier
from peerconnect.domain.moderation.keywords import KeywordGate
from peerconnect.domain.moderation.models import FALLBACK_REASON, ModerationVerdict
from peerconnect.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)


class ModerationGate:
    def __init__(self, keywords: KeywordGate, classifier: Optional[ContentClassifier] = None) -> None:
        self.keywords = keywords
        self.classifier = classifier

    async def review(self, content: str) -> ModerationVerdict:
        """Screen content; never raises for classifier outages."""
        keyword_verdict = self.keywords.check(content)
        if not keyword_verdict.allowed:
            obs_metrics.inc_moderation_decision("keyword", False)
            return keyword_verdict
        if self.classifier is None:
            obs_metrics.inc_moderation_decision("keyword", True)
            return keyword_verdict
        try:
            verdict = await self.classifier.classify(content)
        except UpstreamUnavailable:
            logger.warning("moderation_fallback")
            obs_metrics.inc_moderation_decision("fallback", keyword_verdict.allowed)
            return ModerationVerdict(
                allowed=keyword_verdict.allowed,
                reason=FALLBACK_REASON,
                source="fallback",
                categories=keyword_verdict.categories,
            )
        obs_metrics.inc_moderation_decision(verdict.source, verdict.allowed)
        return verdict

    async def enforce(self, content: str) -> ModerationVerdict:
        verdict = await self.review(content)
        if not verdict.allowed:
            logger.info("post_rejected", extra={"reason": verdict.reason, "source": verdict.source})
            raise ModerationRejected(verdict.reason, verdict.categories)
        return verdict
