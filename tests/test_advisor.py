"""Tests for shandu.advisor with the HTTP layer faked out."""

import threading
from typing import Any

import pytest
import requests
from conftest import make_goal, make_txn

from shandu import advisor
from shandu.advisor import (
    CONNECTION_FALLBACK,
    GOAL_FALLBACK,
    SHOPPING_FALLBACK,
    ResponseBoard,
    extract_citations,
    generate_content,
    get_financial_advice,
    get_goal_advice,
    get_goal_advice_batch,
    get_shopping_insights,
    search_product,
)
from shandu.config import AdvisorSettings

SETTINGS = AdvisorSettings(api_key_env="SHANDU_TEST_API_KEY", endpoint="https://llm.test/v1")


class FakeResponse:
    def __init__(self, payload: Any, status: int = 200) -> None:
        self.payload = payload
        self.status_code = status

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self) -> Any:
        return self.payload


def payload(text: str, chunks: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    candidate: dict[str, Any] = {"content": {"parts": [{"text": text}]}}
    if chunks is not None:
        candidate["groundingMetadata"] = {"groundingChunks": chunks}
    return {"candidates": [candidate]}


@pytest.fixture
def api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SHANDU_TEST_API_KEY", "test-key")


@pytest.fixture
def calls(monkeypatch: pytest.MonkeyPatch) -> list[dict[str, Any]]:
    """Record requests and answer with whatever `calls.reply` holds."""
    recorded: list[dict[str, Any]] = []

    def fake_post(url: str, headers: dict[str, str], json: dict[str, Any], timeout: float) -> FakeResponse:
        recorded.append({"url": url, "headers": headers, "json": json, "timeout": timeout})
        return FakeResponse(payload("Spend less."))

    monkeypatch.setattr(advisor.requests, "post", fake_post)
    return recorded


def reply_with(monkeypatch: pytest.MonkeyPatch, response: Any) -> None:
    def fake_post(*args: Any, **kwargs: Any) -> Any:
        if isinstance(response, Exception):
            raise response
        return response

    monkeypatch.setattr(advisor.requests, "post", fake_post)


class TestGenerateContent:
    """Tests for generate_content."""

    def test_request_shape(self, api_key: None, calls: list[dict[str, Any]]) -> None:
        response = generate_content("Hello", SETTINGS, search=True)

        assert response.text == "Spend less."
        call = calls[0]
        assert call["url"] == "https://llm.test/v1/models/gemini-2.5-flash:generateContent"
        assert call["headers"]["x-goog-api-key"] == "test-key"
        assert call["json"]["contents"][0]["parts"][0]["text"] == "Hello"
        assert call["json"]["tools"] == [{"google_search": {}}]
        assert "Checkers" in call["json"]["systemInstruction"]["parts"][0]["text"]

    def test_no_tools_without_search(self, api_key: None, calls: list[dict[str, Any]]) -> None:
        generate_content("Hello", SETTINGS)
        assert "tools" not in calls[0]["json"]

    def test_missing_key_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SHANDU_TEST_API_KEY", raising=False)
        with pytest.raises(advisor.AdvisorError):
            generate_content("Hello", SETTINGS)


def test_extract_citations_skips_chunks_without_uri() -> None:
    citations = extract_citations(
        payload("x", [{"web": {"uri": "https://a.test", "title": "A"}}, {"web": {"title": "no uri"}}, {"retrieved": {}}])
    )
    assert [(c.title, c.uri) for c in citations] == [("A", "https://a.test")]


class TestFallbacks:
    """Service failures never escape."""

    def test_network_error_gives_fallback(self, api_key: None, monkeypatch: pytest.MonkeyPatch) -> None:
        reply_with(monkeypatch, requests.ConnectionError("down"))
        assert get_financial_advice([], "personal", "Can I afford it?", SETTINGS) == CONNECTION_FALLBACK

    def test_http_error_gives_fallback(self, api_key: None, monkeypatch: pytest.MonkeyPatch) -> None:
        reply_with(monkeypatch, FakeResponse({}, status=500))
        assert get_goal_advice(make_goal(), [], "personal", SETTINGS) == GOAL_FALLBACK

    def test_missing_key_gives_fallback(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SHANDU_TEST_API_KEY", raising=False)
        insights = get_shopping_insights("bread", SETTINGS)
        assert insights.items == []
        assert insights.text == SHOPPING_FALLBACK

    def test_empty_text_gives_default(self, api_key: None, monkeypatch: pytest.MonkeyPatch) -> None:
        reply_with(monkeypatch, FakeResponse({"candidates": []}))
        assert search_product("bread", "personal", SETTINGS).text == "No product data found."


class TestAdvice:
    """Prompts and parsed responses."""

    def test_financial_advice_includes_summary(self, api_key: None, calls: list[dict[str, Any]]) -> None:
        txns = [make_txn("income", 1000, id="a"), make_txn("expense", 250, id="b")]
        answer = get_financial_advice(txns, "business", "How am I doing?", SETTINGS)

        prompt = calls[0]["json"]["contents"][0]["parts"][0]["text"]
        assert answer == "Spend less."
        assert "Current Mode: business" in prompt
        assert "Net Balance: R750.00" in prompt
        assert "User Question: How am I doing?" in prompt

    def test_goal_prompt_depends_on_mode(self, api_key: None, calls: list[dict[str, Any]]) -> None:
        get_goal_advice(make_goal(mode="personal"), [], "personal", SETTINGS)
        get_goal_advice(make_goal(mode="business"), [], "business", SETTINGS)

        personal = calls[0]["json"]["contents"][0]["parts"][0]["text"]
        business = calls[1]["json"]["contents"][0]["parts"][0]["text"]
        assert "The user wants to" in personal
        assert "The business wants to" in business

    def test_shopping_insights_parses_items(self, api_key: None, monkeypatch: pytest.MonkeyPatch) -> None:
        text = 'Cheap bread.\n___DATA_START___\n<item type="cheapest" name="Loaf" price="R12" store="Spar" />\n___DATA_END___'
        reply_with(monkeypatch, FakeResponse(payload(text, [{"web": {"uri": "https://s.test", "title": "S"}}])))

        insights = get_shopping_insights("bread", SETTINGS)

        assert [i.name for i in insights.items] == ["Loaf"]
        assert insights.text == "Cheap bread."
        assert insights.citations[0].uri == "https://s.test"


class TestResponseBoard:
    """Responses are keyed by request and stale ones are dropped."""

    def test_latest_response_wins(self) -> None:
        board = ResponseBoard()
        old = board.begin("g1")
        new = board.begin("g1")

        assert board.complete("g1", new, "new advice") is True
        assert board.complete("g1", old, "old advice") is False
        assert board.get("g1") == "new advice"

    def test_keys_are_independent(self) -> None:
        board = ResponseBoard()
        a = board.begin("a")
        b = board.begin("b")

        board.complete("b", b, "for b")
        assert board.pending("a")
        board.complete("a", a, "for a")

        assert board.get("a") == "for a"
        assert board.get("b") == "for b"
        assert not board.pending("a")


def test_goal_advice_batch_keys_by_goal(api_key: None, monkeypatch: pytest.MonkeyPatch) -> None:
    lock = threading.Lock()
    seen: list[str] = []

    def fake_post(url: str, headers: dict[str, str], json: dict[str, Any], timeout: float) -> FakeResponse:
        prompt = json["contents"][0]["parts"][0]["text"]
        title = prompt.split("Goal: save - ")[1].splitlines()[0]
        with lock:
            seen.append(title)
        return FakeResponse(payload(f"advice for {title}"))

    monkeypatch.setattr(advisor.requests, "post", fake_post)
    goals = [make_goal(id=f"g{i}", title=f"Goal {i}") for i in range(5)]

    results = get_goal_advice_batch(goals, [], "personal", SETTINGS)

    assert results == {f"g{i}": f"advice for Goal {i}" for i in range(5)}
    assert sorted(seen) == [f"Goal {i}" for i in range(5)]
    assert get_goal_advice_batch([], [], "personal", SETTINGS) == {}


def test_malformed_payload_gives_fallback(api_key: None, monkeypatch: pytest.MonkeyPatch) -> None:
    reply_with(monkeypatch, FakeResponse({"candidates": ["not an object"]}))
    assert get_financial_advice([], "personal", "Hello?", SETTINGS) == CONNECTION_FALLBACK
