"""Domain models and pure functions for shandu.

This package contains the functional core:
- Pure functions with no side effects
- No I/O operations
- Easy to test
- Business logic separated from infrastructure
"""

from shandu.domain.models import CategoryName, Goal, Money, Transaction

__all__ = ["CategoryName", "Goal", "Money", "Transaction"]
