import json

import httpx
import pytest

from peerconnect.domain.errors import ModerationRejected, UpstreamUnavailable
from peerconnect.domain.moderation.classifier import OpenAIClassifier, parse_decision
from peerconnect.domain.moderation.gate import ModerationGate
from peerconnect.domain.moderation.keywords import KeywordGate
from peerconnect.domain.moderation.models import (
    AI_ALLOW_REASON,
    AI_REJECT_REASON,
    FALLBACK_REASON,
    KEYWORD_REJECT_REASON,
)
from peerconnect.settings import DEFAULT_BANNED_KEYWORDS


def _completion(answer: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": answer}}]}


def _classifier(handler, api_key: str | None = "sk-test") -> OpenAIClassifier:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return OpenAIClassifier(http=http, api_key=api_key, base_url="https://llm.test/v1")


def _gate(classifier=None) -> ModerationGate:
    return ModerationGate(KeywordGate(DEFAULT_BANNED_KEYWORDS), classifier)


def test_keyword_gate_is_case_insensitive_and_sorted():
    gate = KeywordGate(DEFAULT_BANNED_KEYWORDS)
    verdict = gate.check("Anyone up for PIZZA after the Party?")
    assert verdict.allowed is False
    assert verdict.reason == KEYWORD_REJECT_REASON
    assert verdict.categories == ["party", "pizza"]


def test_keyword_gate_allows_academic_text():
    assert KeywordGate(DEFAULT_BANNED_KEYWORDS).check("Notes for the linear algebra exam").allowed


@pytest.mark.parametrize(
    "answer,expected",
    [("ALLOW", True), ("reject", False), ("Allow? No, REJECT", False), ("unsure", False)],
)
def test_parse_decision(answer, expected):
    assert parse_decision(answer) is expected


@pytest.mark.asyncio
async def test_classifier_allow():
    seen: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        assert request.headers["Authorization"] == "Bearer sk-test"
        assert request.url.path == "/v1/chat/completions"
        return httpx.Response(200, json=_completion("ALLOW"))

    verdict = await _gate(_classifier(handler)).enforce("Study group for the physics midterm")

    assert verdict.allowed is True
    assert verdict.reason == AI_ALLOW_REASON
    assert seen[0]["max_tokens"] == 20
    assert seen[0]["messages"][1]["content"] == "Study group for the physics midterm"


@pytest.mark.asyncio
async def test_classifier_reject_raises_with_categories():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=_completion("REJECT"))

    with pytest.raises(ModerationRejected) as excinfo:
        await _gate(_classifier(handler)).enforce("Who watched the game last night?")

    assert excinfo.value.reason == AI_REJECT_REASON
    assert excinfo.value.categories == ["off_topic"]


@pytest.mark.asyncio
async def test_classifier_outage_falls_back_to_keywords():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": "boom"})

    verdict = await _gate(_classifier(handler)).review("Lecture recap for week 3")

    assert verdict.allowed is True
    assert verdict.reason == FALLBACK_REASON
    assert verdict.source == "fallback"


@pytest.mark.asyncio
async def test_malformed_classifier_body_falls_back():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"unexpected": True})

    verdict = await _gate(_classifier(handler)).review("Tutorial answers")

    assert verdict.source == "fallback"


@pytest.mark.asyncio
async def test_missing_api_key_is_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected without a key")

    classifier = _classifier(handler, api_key=None)

    with pytest.raises(UpstreamUnavailable):
        await classifier.classify("anything")

    verdict = await _gate(classifier).review("Exam timetable")
    assert verdict.allowed is True
    assert verdict.reason == FALLBACK_REASON


@pytest.mark.asyncio
async def test_keyword_gate_only_without_classifier():
    verdict = await _gate().review("Assignment 2 clarifications")
    assert verdict.allowed is True
    assert verdict.source == "keyword"
