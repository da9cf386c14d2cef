"""JSON record encoding and validation at the persistence boundary.

Stored collections are JSON arrays of camelCase records. Loading coerces
every record into a typed dataclass; malformed records are skipped and
malformed documents fall back to defaults, with a logged warning. Nothing
in this module raises on bad stored data.
"""

import json
import logging
from collections.abc import Callable
from typing import Any, TypeVar

from shandu.dates import format_date, parse_date
from shandu.domain.models import (
    DEFAULT_CATEGORIES,
    DEFAULT_MODE,
    DEFAULT_THEME,
    GOAL_TYPES,
    MODES,
    PRIORITIES,
    THEMES,
    TRANSACTION_TYPES,
    CategoryName,
    Goal,
    Mode,
    Money,
    Transaction,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Older data used "student" for the personal mode
_MODE_ALIASES = {"student": "personal"}


class RecordError(ValueError):
    """Raised when a stored record cannot be coerced into a domain object."""


def encode_transaction(txn: Transaction) -> dict[str, Any]:
    """Encode a transaction as a JSON-ready record."""
    return {
        "id": txn.id,
        "type": txn.type,
        "amount": txn.amount,
        "category": txn.category,
        "description": txn.description,
        "date": format_date(txn.date),
    }


def encode_goal(goal: Goal) -> dict[str, Any]:
    """Encode a goal as a JSON-ready record."""
    return {
        "id": goal.id,
        "mode": goal.mode,
        "type": goal.type,
        "title": goal.title,
        "category": goal.category,
        "targetAmount": goal.target_amount,
        "deadline": format_date(goal.deadline),
        "priority": goal.priority,
        "createdAt": format_date(goal.created_at),
    }


def _require(raw: dict[str, Any], field: str) -> Any:
    if field not in raw or raw[field] is None:
        raise RecordError(f"missing field '{field}'")
    return raw[field]


def _amount(value: Any, field: str) -> Money:
    if isinstance(value, bool):
        raise RecordError(f"'{field}' is not a number")
    try:
        amount = float(value)
    except (TypeError, ValueError) as e:
        raise RecordError(f"'{field}' is not a number: {value!r}") from e
    if amount != amount or amount in (float("inf"), float("-inf")):
        raise RecordError(f"'{field}' is not finite")
    return Money(amount)


def _date(value: Any, field: str) -> Any:
    try:
        return parse_date(value)
    except ValueError as e:
        raise RecordError(f"'{field}' is not a date: {value!r}") from e


def _choice(value: Any, choices: tuple[str, ...], field: str) -> Any:
    if value not in choices:
        raise RecordError(f"'{field}' must be one of {', '.join(choices)}, got {value!r}")
    return value


def decode_transaction(raw: Any) -> Transaction:
    """Coerce a stored record into a Transaction.

    Raises:
        RecordError: If the record is malformed.
    """
    if not isinstance(raw, dict):
        raise RecordError("record is not an object")

    amount = _amount(_require(raw, "amount"), "amount")
    if amount < 0:
        raise RecordError("'amount' is negative")

    return Transaction(
        id=str(_require(raw, "id")),
        type=_choice(_require(raw, "type"), TRANSACTION_TYPES, "type"),
        amount=amount,
        category=CategoryName(str(raw.get("category") or "Other")),
        description=str(raw.get("description") or ""),
        date=_date(_require(raw, "date"), "date"),
    )


def decode_goal(raw: Any) -> Goal:
    """Coerce a stored record into a Goal.

    Raises:
        RecordError: If the record is malformed.
    """
    if not isinstance(raw, dict):
        raise RecordError("record is not an object")

    target = _amount(_require(raw, "targetAmount"), "targetAmount")
    if target <= 0:
        raise RecordError("'targetAmount' must be positive")

    mode = _require(raw, "mode")
    if isinstance(mode, str):
        mode = _MODE_ALIASES.get(mode, mode)

    return Goal(
        id=str(_require(raw, "id")),
        mode=_choice(mode, MODES, "mode"),
        type=_choice(_require(raw, "type"), GOAL_TYPES, "type"),
        title=str(_require(raw, "title")),
        category=CategoryName(str(raw.get("category") or "General")),
        target_amount=target,
        deadline=_date(_require(raw, "deadline"), "deadline"),
        priority=_choice(raw.get("priority", "medium"), PRIORITIES, "priority"),
        created_at=_date(_require(raw, "createdAt"), "createdAt"),
    )


def _load_json(text: str | None, key: str) -> Any:
    if text is None:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning("Failed to load %s: %s", key, e)
        return None


def _decode_list(text: str | None, key: str, decode: Callable[[Any], T]) -> tuple[T, ...]:
    data = _load_json(text, key)
    if data is None:
        return ()
    if not isinstance(data, list):
        logger.warning("Failed to load %s: expected a list, got %s", key, type(data).__name__)
        return ()

    decoded: list[T] = []
    for index, raw in enumerate(data):
        try:
            decoded.append(decode(raw))
        except RecordError as e:
            logger.warning("Skipping malformed %s record %d: %s", key, index, e)
    return tuple(decoded)


def decode_transactions(text: str | None) -> tuple[Transaction, ...]:
    """Decode a stored transactions document; malformed records are skipped."""
    return _decode_list(text, "transactions", decode_transaction)


def decode_goals(text: str | None) -> tuple[Goal, ...]:
    """Decode a stored goals document; malformed records are skipped."""
    return _decode_list(text, "goals", decode_goal)


def decode_categories(text: str | None) -> tuple[CategoryName, ...]:
    """Decode the stored category list, falling back to the defaults."""
    data = _load_json(text, "categories")
    if data is None:
        return DEFAULT_CATEGORIES
    if not isinstance(data, list) or not all(isinstance(c, str) for c in data):
        logger.warning("Failed to load categories: expected a list of strings")
        return DEFAULT_CATEGORIES

    categories: list[CategoryName] = []
    for name in data:
        if name.strip() and name not in categories:
            categories.append(CategoryName(name))
    return tuple(categories) or DEFAULT_CATEGORIES


def decode_theme(text: str | None) -> str:
    """Decode the stored theme id, falling back to the default theme."""
    data = _load_json(text, "theme")
    if data is None:
        return DEFAULT_THEME
    if not isinstance(data, str) or data not in THEMES:
        logger.warning("Unknown theme %r, using %s", data, DEFAULT_THEME)
        return DEFAULT_THEME
    theme: str = data
    return theme


def decode_mode(text: str | None) -> Mode:
    """Decode the stored operating mode, falling back to personal."""
    data = _load_json(text, "mode")
    if data is None:
        return DEFAULT_MODE
    data = _MODE_ALIASES.get(data, data) if isinstance(data, str) else data
    if data not in MODES:
        logger.warning("Unknown mode %r, using %s", data, DEFAULT_MODE)
        return DEFAULT_MODE
    mode: Mode = data
    return mode
