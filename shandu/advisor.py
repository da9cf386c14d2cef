"""Advice and product-search service interactions.

Talks to a Gemini-style `generateContent` REST endpoint. Every public
helper returns a usable value: service failures are logged and replaced by
a short in-character fallback message, so callers never see an exception
from here and the ledger is never touched.
"""

import itertools
import json
import logging
import threading
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any

import requests

from shandu.config import AdvisorSettings
from shandu.domain.ledger import recent_transactions
from shandu.domain.models import Citation, Goal, Mode, ShoppingItem, Transaction
from shandu.domain.shopping import DATA_END, DATA_START, parse_shopping_response
from shandu.domain.summary import summarize
from shandu.formatting import format_money, transaction_line

logger = logging.getLogger(__name__)

ADVICE_FALLBACK = "I couldn't analyse that right now. Check your inputs."
CONNECTION_FALLBACK = "Connection error. Stick to your spreadsheet for now."
SEARCH_FALLBACK = "I couldn't reach live market data. Stick to the budget."
SHOPPING_FALLBACK = "Market data unavailable. Check your internet connection."
GOAL_FALLBACK = "I can't analyse this goal right now. Do the maths manually."

SHOPPING_CATEGORIES = "Groceries, Toiletries, Transport, School, Entertainment, Rent, Utilities, Health, Business"


class AdvisorError(Exception):
    """Raised when the service is unreachable or returns an unusable response."""


@dataclass(frozen=True)
class AdvisorResponse:
    """Text and citations returned by the service."""

    text: str
    citations: list[Citation] = field(default_factory=list)


@dataclass(frozen=True)
class ShoppingInsights:
    """Shopping recommendations plus the narrative text around them."""

    items: list[ShoppingItem]
    text: str
    citations: list[Citation] = field(default_factory=list)


def system_instruction(settings: AdvisorSettings) -> str:
    """Persona and sourcing rules sent with every request."""
    stores = ", ".join(settings.trusted_stores)
    return f"""
You are Buddy, a blunt, numbers-first financial strategist.
Your only objective is growing the user's wealth and efficiency.

If the user is in personal mode:
- Focus on survival, cutting costs and stretching every unit of currency.
- Be direct about luxury spending.

If the user is in business mode:
- Focus on profit, cost control and revenue growth.
- Speak like a hard-nosed CFO.

Sourcing rules:
1. Only suggest products from trusted retailers: {stores}.
2. Prioritise value, but suggest premium tools when they pay for themselves.
3. Categorise every expense.

Always analyse feasibility with cold, hard logic.
""".strip()


def extract_text(payload: dict[str, Any]) -> str:
    """Concatenate the text parts of the first candidate."""
    candidates = payload.get("candidates") or []
    if not candidates:
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(part.get("text", "") for part in parts if isinstance(part, dict))


def extract_citations(payload: dict[str, Any]) -> list[Citation]:
    """Collect {title, uri} pairs from the first candidate's grounding metadata."""
    candidates = payload.get("candidates") or []
    if not candidates:
        return []
    chunks = (candidates[0].get("groundingMetadata") or {}).get("groundingChunks") or []

    citations: list[Citation] = []
    for chunk in chunks:
        web = chunk.get("web") if isinstance(chunk, dict) else None
        if isinstance(web, dict) and web.get("uri"):
            citations.append(Citation(title=str(web.get("title") or web["uri"]), uri=str(web["uri"])))
    return citations


def generate_content(prompt: str, settings: AdvisorSettings, search: bool = False) -> AdvisorResponse:
    """Send one prompt to the service.

    Args:
        prompt: User content.
        settings: Advisor settings (endpoint, model, key).
        search: Whether to enable web-search grounding.

    Returns:
        AdvisorResponse with text and citations.

    Raises:
        AdvisorError: If no API key is configured or the response is unusable.
        requests.RequestException: If the request fails.
    """
    api_key = settings.api_key()
    if not api_key:
        raise AdvisorError(f"No API key set in ${settings.api_key_env}")

    body: dict[str, Any] = {
        "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        "systemInstruction": {"parts": [{"text": system_instruction(settings)}]},
    }
    if search:
        body["tools"] = [{"google_search": {}}]

    headers = {
        "x-goog-api-key": api_key,
        "Content-Type": "application/json",
    }
    url = f"{settings.endpoint}/models/{settings.model}:generateContent"
    response = requests.post(url, headers=headers, json=body, timeout=settings.timeout)
    response.raise_for_status()

    try:
        payload = response.json()
    except json.JSONDecodeError as e:
        raise AdvisorError(f"Malformed response: {e}") from e
    if not isinstance(payload, dict):
        raise AdvisorError("Malformed response: expected an object")

    try:
        return AdvisorResponse(text=extract_text(payload), citations=extract_citations(payload))
    except (AttributeError, TypeError) as e:
        raise AdvisorError(f"Malformed response: {e}") from e


def summary_context(transactions: Sequence[Transaction], mode: Mode, settings: AdvisorSettings) -> str:
    """Ledger context for a free-form question."""
    summary = summarize(transactions)
    recent = "\n".join(f"  - {transaction_line(t, settings.currency)}" for t in recent_transactions(transactions))
    return f"""
Current Mode: {mode}
Total Income: {format_money(summary.total_income, settings.currency)}
Total Expenses: {format_money(summary.total_expense, settings.currency)}
Net Balance: {format_money(summary.balance, settings.currency)}
Recent Transactions:
{recent or "  (none)"}
User Location: {settings.location}
""".strip()


def goal_context(goal: Goal, transactions: Sequence[Transaction], mode: Mode, settings: AdvisorSettings) -> str:
    """Goal and ledger context for goal advice."""
    summary = summarize(transactions)
    return f"""
User Mode: {mode}
Goal: {goal.type} - {goal.title}
Target: {format_money(goal.target_amount, settings.currency)}
Deadline: {goal.deadline.date().isoformat()}
Current Balance: {format_money(summary.balance, settings.currency)}
Total Income (Recorded): {format_money(summary.total_income, settings.currency)}
Total Expense (Recorded): {format_money(summary.total_expense, settings.currency)}
""".strip()


def goal_task(goal: Goal, mode: Mode, settings: AdvisorSettings) -> str:
    """Mode-specific task prompt for goal advice."""
    target = format_money(goal.target_amount, settings.currency)
    if mode == "personal":
        return (
            f'The user wants to "{goal.title}" ({target}). Analyse this. Give 3 blunt tips to cut costs. '
            "Call out heavy spending on transport or eating out. Suggest lifestyle downgrades if necessary."
        )
    return (
        f'The business wants to "{goal.title}" ({target}). Analyse feasibility based on cashflow. '
        "Give aggressive advice: raising prices, cutting costs or finding cheaper suppliers."
    )


def shopping_prompt(query: str, settings: AdvisorSettings) -> str:
    """Prompt asking for three structured product recommendations."""
    line = (
        '<item type="{kind}" name="[Product Name]" brand="[Brand]" price="[Numeric Price]" '
        'store="[Store Name]" category="[Category]" imageUrl="[URL if found, else empty]" reason="[Why this one?]" />'
    )
    items = "\n".join(line.format(kind=kind) for kind in ("cheapest", "healthier", "sale"))
    return f"""
Find current prices for "{query}" in {settings.location}.
I need 3 specific recommendations from TRUSTED RETAILERS only:
1. The absolute CHEAPEST option (must be safe/trusted).
2. A HEALTHIER (or higher quality) alternative.
3. A SALE or SPECIAL promotion item if available (otherwise best value).

You must include the price in local currency ({settings.currency}).
Try to find a specific brand name.
Assign a category from: {SHOPPING_CATEGORIES}.

After your natural language summary, output the data in this exact format for parsing:
{DATA_START}
{items}
{DATA_END}
""".strip()


def _ask(prompt: str, settings: AdvisorSettings, search: bool, what: str) -> AdvisorResponse | None:
    try:
        return generate_content(prompt, settings, search=search)
    except (requests.RequestException, AdvisorError) as e:
        logger.error("%s failed: %s", what, e)
        return None


def get_financial_advice(
    transactions: Sequence[Transaction], mode: Mode, question: str, settings: AdvisorSettings
) -> str:
    """Answer a free-form question with the ledger as context."""
    prompt = f"Context:\n{summary_context(transactions, mode, settings)}\n\nUser Question: {question}"
    response = _ask(prompt, settings, search=False, what="Advice request")
    if response is None:
        return CONNECTION_FALLBACK
    return response.text.strip() or ADVICE_FALLBACK


def search_product(query: str, mode: Mode, settings: AdvisorSettings) -> AdvisorResponse:
    """Look up a product's current price, with cheaper or healthier alternatives."""
    prompt = (
        f"[{mode} mode] Find the current price of {query} in {settings.location}. "
        "Suggest a cheaper or healthier alternative if available. "
        "Provide specific store names and prices if possible. Keep it brief and direct."
    )
    response = _ask(prompt, settings, search=True, what="Product search")
    if response is None:
        return AdvisorResponse(text=SEARCH_FALLBACK)
    return AdvisorResponse(text=response.text.strip() or "No product data found.", citations=response.citations)


def get_shopping_insights(query: str, settings: AdvisorSettings) -> ShoppingInsights:
    """Structured cheapest/healthier/sale recommendations for a query."""
    response = _ask(shopping_prompt(query, settings), settings, search=True, what="Shopping insights")
    if response is None:
        return ShoppingInsights(items=[], text=SHOPPING_FALLBACK)
    items, text = parse_shopping_response(response.text)
    return ShoppingInsights(items=items, text=text, citations=response.citations)


def get_goal_advice(goal: Goal, transactions: Sequence[Transaction], mode: Mode, settings: AdvisorSettings) -> str:
    """Advice on reaching one goal."""
    prompt = (
        f"Context:\n{goal_context(goal, transactions, mode, settings)}\n\n"
        f"Task: {goal_task(goal, mode, settings)}"
    )
    response = _ask(prompt, settings, search=False, what=f"Goal advice for {goal.id}")
    if response is None:
        return GOAL_FALLBACK
    return response.text.strip() or "Goal analysis unavailable."


class ResponseBoard:
    """Latest response per key, tolerant of out-of-order completion.

    Each request takes a token from `begin`. A response is only applied if
    its token is still the newest for that key, so a superseded request that
    finishes late is discarded instead of overwriting newer state.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._tokens = itertools.count(1)
        self._latest: dict[str, int] = {}
        self._responses: dict[str, str] = {}

    def begin(self, key: str) -> int:
        with self._lock:
            token = next(self._tokens)
            self._latest[key] = token
            return token

    def complete(self, key: str, token: int, response: str) -> bool:
        """Apply a response; returns False if the request was superseded."""
        with self._lock:
            if self._latest.get(key) != token:
                logger.debug("Discarding stale response for %s (token %d)", key, token)
                return False
            self._responses[key] = response
            del self._latest[key]
            return True

    def pending(self, key: str) -> bool:
        with self._lock:
            return key in self._latest

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._responses.get(key)


def get_goal_advice_batch(
    goals: Sequence[Goal],
    transactions: Sequence[Transaction],
    mode: Mode,
    settings: AdvisorSettings,
    board: ResponseBoard | None = None,
    max_workers: int = 4,
) -> dict[str, str]:
    """Fetch advice for several goals concurrently.

    Args:
        goals: Goals to advise on.
        transactions: Ledger snapshot shared by all requests.
        mode: Active operating mode.
        settings: Advisor settings.
        board: Board to record responses on. A fresh one is used if omitted.
        max_workers: Maximum concurrent requests.

    Returns:
        Dictionary of goal id to advice text.
    """
    board = board or ResponseBoard()
    if not goals:
        return {}

    def fetch(goal: Goal, token: int) -> None:
        board.complete(goal.id, token, get_goal_advice(goal, transactions, mode, settings))

    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(goals)))) as pool:
        futures = [pool.submit(fetch, goal, board.begin(goal.id)) for goal in goals]
        for future in futures:
            future.result()

    results: dict[str, str] = {}
    for goal in goals:
        advice = board.get(goal.id)
        if advice is not None:
            results[goal.id] = advice
    return results
