"""Domain type definitions for shandu.

These types provide semantic clarity and help with type checking:
- Money: Amount in the user's currency (currency-agnostic, decimal)
- CategoryName: Name of a spending/income category
- Transaction: A single dated income or expense record
- Goal: A savings/spending target with a deadline
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Literal, NewType

# Money amounts are plain decimals; no currency conversion is ever applied
Money = NewType("Money", float)

# Category name for transactions and goals
CategoryName = NewType("CategoryName", str)

TransactionType = Literal["income", "expense"]
Mode = Literal["personal", "business"]
GoalType = Literal["save", "debt", "emergency", "buy", "waste_reduction", "profit_increase"]
Priority = Literal["low", "medium", "high"]
ItemType = Literal["cheapest", "healthier", "sale", "general"]

TRANSACTION_TYPES: tuple[TransactionType, ...] = ("income", "expense")
MODES: tuple[Mode, ...] = ("personal", "business")
GOAL_TYPES: tuple[GoalType, ...] = ("save", "debt", "emergency", "buy", "waste_reduction", "profit_increase")
PRIORITIES: tuple[Priority, ...] = ("low", "medium", "high")
ITEM_TYPES: tuple[ItemType, ...] = ("cheapest", "healthier", "sale", "general")

DEFAULT_MODE: Mode = "personal"

DEFAULT_CATEGORIES: tuple[CategoryName, ...] = tuple(
    CategoryName(name)
    for name in (
        "Groceries",
        "Toiletries",
        "Transport",
        "School",
        "Entertainment",
        "Rent",
        "Utilities",
        "Health",
        "Business",
        "Other",
    )
)

# Theme catalogue; the first entry is the default
THEMES: dict[str, str] = {
    "obsidian": "Obsidian Ledger",
    "paper": "Paper Trail",
    "neon": "Neon Vault",
    "forest": "Forest Reserve",
    "pixel": "Pixel Arcade",
}
DEFAULT_THEME = "obsidian"


@dataclass(frozen=True)
class Transaction:
    """Immutable income or expense record."""

    id: str
    type: TransactionType
    amount: Money
    category: CategoryName
    description: str
    date: datetime


@dataclass(frozen=True)
class Goal:
    """Immutable savings or spending target."""

    id: str
    mode: Mode
    type: GoalType
    title: str
    category: CategoryName
    target_amount: Money
    deadline: datetime
    priority: Priority
    created_at: datetime


@dataclass(frozen=True)
class ShoppingItem:
    """Immutable product recommendation extracted from a shopping search."""

    type: ItemType
    name: str
    brand: str
    price: Money
    store: str
    category: CategoryName
    reason: str
    image_url: str = ""


@dataclass(frozen=True)
class Citation:
    """A source link returned alongside advisory text."""

    title: str
    uri: str
