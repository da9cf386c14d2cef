"""Pure functions for shopping insights.

Advisory responses carry product recommendations in a delimited block of
`<item ... />` tags after the narrative text:

    ___DATA_START___
    <item type="cheapest" name="..." brand="..." price="..." store="..." ... />
    ___DATA_END___

Extraction is best-effort: a missing or malformed block yields no items,
and the narrative text is always kept.
"""

import re
from datetime import datetime

from shandu.domain.ledger import new_transaction
from shandu.domain.models import ITEM_TYPES, CategoryName, ItemType, Money, ShoppingItem, Transaction

DATA_START = "___DATA_START___"
DATA_END = "___DATA_END___"

_DATA_BLOCK_RE = re.compile(re.escape(DATA_START) + r"(.*?)" + re.escape(DATA_END), re.DOTALL)
_ITEM_RE = re.compile(r"<item\s+([^>]+)/>")
_ATTR_RE = re.compile(r'(\w+)="([^"]*)"')
_PRICE_CHARS_RE = re.compile(r"[^0-9.]")


def parse_price(raw: str) -> Money:
    """Parse a price such as "R 24.99" into a number; 0 when unparseable."""
    cleaned = _PRICE_CHARS_RE.sub("", raw)
    match = re.match(r"\d*\.?\d+", cleaned)
    if not match:
        return Money(0.0)
    return Money(float(match.group(0)))


def parse_item(attributes: str) -> ShoppingItem:
    """Build a ShoppingItem from the attribute text of one `<item />` tag."""
    attrs = dict(_ATTR_RE.findall(attributes))
    raw_type = attrs.get("type", "").strip().lower()
    item_type: ItemType = raw_type if raw_type in ITEM_TYPES else "general"  # type: ignore[assignment]

    return ShoppingItem(
        type=item_type,
        name=attrs.get("name", "").strip(),
        brand=attrs.get("brand", "").strip() or "Generic",
        price=parse_price(attrs.get("price", "")),
        store=attrs.get("store", "").strip(),
        category=CategoryName(attrs.get("category", "").strip() or "Groceries"),
        reason=attrs.get("reason", "").strip(),
        image_url=attrs.get("imageUrl", "").strip(),
    )


def parse_shopping_response(text: str) -> tuple[list[ShoppingItem], str]:
    """Split an advisory response into product items and narrative text.

    Args:
        text: Full response text.

    Returns:
        Tuple of (items, narrative). Items is empty when no data block is found.
    """
    match = _DATA_BLOCK_RE.search(text)
    if not match:
        return [], text.strip()

    items = [parse_item(attrs) for attrs in _ITEM_RE.findall(match.group(1))]
    narrative = _DATA_BLOCK_RE.sub("", text, count=1).strip()
    return items, narrative


def purchase_transaction(item: ShoppingItem, now: datetime | None = None) -> Transaction:
    """Expense transaction for a confirmed purchase of a shopping item."""
    return new_transaction(
        type="expense",
        amount=item.price,
        category=item.category or "Shopping",
        description=f"{item.brand} {item.name} ({item.store})",
        now=now,
    )
