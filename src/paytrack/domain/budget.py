"""Monthly budget planning domain service.

A budget splits one month's net income across categories, each made of
named subcategory allocations. Saved budgets form a short rolling history
keyed by month and year.
"""

import logging
import re
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any, Optional, Sequence

from paytrack.database.base import Database
from paytrack.domain.entities import BudgetSnapshot
from paytrack.domain.errors import NotFoundError, ValidationError, budget_entry_not_found
from paytrack.domain.import_plan import MAX_AMOUNT, MAX_YEAR, MIN_YEAR
from paytrack.utils.amount_parser import parse_amount

logger = logging.getLogger(__name__)

MAX_BUDGET_HISTORY = 6

_SLUG_CHARS = re.compile(r"[^a-z0-9]+")


@dataclass(frozen=True)
class Allocation:
    """Amount set aside for one subcategory of a budget category."""

    category: str
    subcategory: str
    amount: Decimal


def parse_allocation(text: str) -> Allocation:
    """Parse "Category/Subcategory=Amount"; without a subcategory the category name is reused.

    Raises:
        ValidationError: If the text has no "=" or the amount is invalid
    """
    name, sep, raw_amount = text.partition("=")
    if not sep:
        raise ValidationError(f"Allocation must look like Category/Subcategory=Amount, got '{text}'")

    category, _, subcategory = name.partition("/")
    category = category.strip()
    subcategory = subcategory.strip() or category
    if not category:
        raise ValidationError(f"Allocation has no category: '{text}'")

    try:
        amount = parse_amount(raw_amount)
    except ValueError as e:
        raise ValidationError(f"Invalid amount in allocation '{text}': {e}") from e
    return Allocation(category=category, subcategory=subcategory, amount=amount)


def _slug(name: str) -> str:
    return _SLUG_CHARS.sub("-", name.lower()).strip("-")


def _json_number(amount: Decimal) -> Any:
    # Budget categories live in a JSON column
    return int(amount) if amount == amount.to_integral_value() else float(amount)


def build_categories(allocations: Sequence[Allocation]) -> list[dict[str, Any]]:
    """Group allocations into the stored category structure, keeping first-seen order.

    Each category's own amount is the sum of its subcategories.
    """
    categories: dict[str, dict[str, Any]] = {}
    totals: dict[str, Decimal] = {}
    for allocation in allocations:
        category = categories.setdefault(
            allocation.category,
            {"id": _slug(allocation.category), "name": allocation.category, "amount": 0, "subcategories": []},
        )
        category["subcategories"].append(
            {
                "id": f"{category['id']}-{_slug(allocation.subcategory)}",
                "name": allocation.subcategory,
                "amount": _json_number(allocation.amount),
            }
        )
        totals[allocation.category] = totals.get(allocation.category, Decimal(0)) + allocation.amount

    for name, category in categories.items():
        category["amount"] = _json_number(totals[name])
    return list(categories.values())


def allocated_total(categories: Sequence[dict[str, Any]]) -> Decimal:
    """Sum every subcategory amount of stored budget categories."""
    total = Decimal(0)
    for category in categories:
        for subcategory in category.get("subcategories") or []:
            total += Decimal(str(subcategory.get("amount") or 0))
    return total


class BudgetService:
    """Service for saving, editing and listing monthly budgets."""

    def __init__(self, db: Database):
        """Initialize budget service.

        Args:
            db: Database instance
        """
        self.db = db

    def save_budget(
        self,
        user_id: str,
        month: int,
        year: int,
        net_income: Decimal,
        allocations: Sequence[Allocation],
    ) -> int:
        """Save the budget for a month, replacing any budget already saved for it.

        Only MAX_BUDGET_HISTORY budgets are kept. Saving a new month when the
        history is full first deletes the oldest budgets by period.

        Args:
            user_id: Owner of the budget
            month: Month (1-12)
            year: Year
            net_income: Net income to distribute
            allocations: Subcategory allocations

        Returns:
            Budget entry ID

        Raises:
            ValidationError: If the period or an amount is out of range
        """
        _check_period(month, year)
        _check_amount("Net income", net_income)
        for allocation in allocations:
            _check_amount(f"Allocation for '{allocation.subcategory}'", allocation.amount)

        categories = build_categories(allocations)
        total_allocated = allocated_total(categories)

        history = self.db.list_budget_history(user_id)
        if not any(b.month == month and b.year == year for b in history):
            for oldest in history[: max(len(history) - MAX_BUDGET_HISTORY + 1, 0)]:
                logger.info(f"Dropping budget {oldest.month:02d}/{oldest.year} to keep {MAX_BUDGET_HISTORY}")
                self.db.delete_budget_snapshot(oldest.id)

        entry_id = self.db.upsert_budget_snapshot(
            user_id=user_id,
            month=month,
            year=year,
            net_income=net_income,
            total_allocated=total_allocated,
            remaining=max(net_income - total_allocated, Decimal(0)),
            categories=categories,
            saved_at=datetime.now(UTC),
        )
        logger.info(f"Saved budget {month:02d}/{year} for user '{user_id}'")
        return entry_id

    def list_budgets(self, user_id: str) -> list[BudgetSnapshot]:
        """List the user's saved budgets, newest period first."""
        return list(reversed(self.db.list_budget_history(user_id)))

    def get_budget(self, user_id: str, entry_id: int) -> Optional[BudgetSnapshot]:
        """Get one of the user's budgets by ID, or None."""
        snapshot = self.db.get_budget_snapshot(entry_id)
        if snapshot is None or snapshot.user_id != user_id:
            return None
        return snapshot

    def update_budget(
        self,
        user_id: str,
        entry_id: int,
        net_income: Optional[Decimal] = None,
        allocations: Optional[Sequence[Allocation]] = None,
    ) -> BudgetSnapshot:
        """Edit a saved budget.

        Allocated and remaining amounts are recomputed from the (new or
        kept) categories. Remaining never goes below zero.

        Raises:
            NotFoundError: If the budget doesn't exist for this user
            ValidationError: If an amount is out of range
        """
        snapshot = self.get_budget(user_id, entry_id)
        if snapshot is None:
            raise NotFoundError(budget_entry_not_found(entry_id))

        net = snapshot.net_income if net_income is None else net_income
        _check_amount("Net income", net)

        if allocations:
            for allocation in allocations:
                _check_amount(f"Allocation for '{allocation.subcategory}'", allocation.amount)
            categories = build_categories(allocations)
        else:
            categories = snapshot.categories

        total_allocated = allocated_total(categories) if categories else snapshot.total_allocated
        self.db.update_budget_snapshot(
            entry_id,
            net_income=net,
            total_allocated=total_allocated,
            remaining=max(net - total_allocated, Decimal(0)),
            categories=categories,
        )
        logger.info(f"Updated budget {snapshot.month:02d}/{snapshot.year}")
        return self.db.get_budget_snapshot(entry_id)

    def delete_budget(self, user_id: str, entry_id: int) -> None:
        """Delete one of the user's budgets.

        Raises:
            NotFoundError: If the budget doesn't exist for this user
        """
        if self.get_budget(user_id, entry_id) is None:
            raise NotFoundError(budget_entry_not_found(entry_id))
        self.db.delete_budget_snapshot(entry_id)
        logger.info(f"Deleted budget {entry_id}")


def _check_period(month: int, year: int) -> None:
    if not 1 <= month <= 12:
        raise ValidationError(f"Month must be between 1 and 12, got {month}")
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise ValidationError(f"Year must be between {MIN_YEAR} and {MAX_YEAR}, got {year}")


def _check_amount(label: str, amount: Decimal) -> None:
    if not amount.is_finite() or amount < 0 or amount > MAX_AMOUNT:
        raise ValidationError(f"{label} must be between 0 and {MAX_AMOUNT:,}")
