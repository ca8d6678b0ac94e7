#!/usr/bin/env python3
"""
Default Budget Allocation Policies

When an expense category has no budget, the aggregator asks a policy for a
default display budget so percentage queries are always well-defined. These
defaults are a display convenience, not financial advice, and are flagged with
CategoryBudget.is_default.
"""

from collections.abc import Sequence
from decimal import Decimal
from typing import Protocol

from ..core.currency import ZERO


class BudgetAllocationPolicy(Protocol):
    """Computes default budgets for categories that have none."""

    def allocate(
        self,
        missing: Sequence[str],
        observed: Sequence[str],
        total: Decimal,
    ) -> dict[str, Decimal]:
        """
        Allocate default limits.

        Args:
            missing: Expense categories that need a default budget
            observed: Every expense category currently seen (includes missing)
            total: Nominal total budget being divided

        Returns:
            Mapping of each missing category to a non-negative limit
        """
        ...


class EvenSplitAllocation:
    """Split the nominal total evenly across every observed expense category."""

    def allocate(self, missing: Sequence[str], observed: Sequence[str], total: Decimal) -> dict[str, Decimal]:
        if not missing:
            return {}
        share = (total / len(observed or missing)).quantize(Decimal("0.01"))
        return {category: share for category in missing}


class WeightedAllocation:
    """
    Fixed shares for well-known categories, even split for the rest.

    Shares are fractions of the nominal total; matching is case-insensitive.
    """

    DEFAULT_WEIGHTS = {
        "housing": Decimal("0.35"),
        "food": Decimal("0.25"),
        "transportation": Decimal("0.10"),
        "entertainment": Decimal("0.05"),
    }

    def __init__(self, weights: dict[str, Decimal] | None = None):
        self.weights = {k.lower(): v for k, v in (weights or self.DEFAULT_WEIGHTS).items()}

    def allocate(self, missing: Sequence[str], observed: Sequence[str], total: Decimal) -> dict[str, Decimal]:
        if not missing:
            return {}
        per_category = (total / len(observed or missing)).quantize(Decimal("0.01"))
        allocations = {}
        for category in missing:
            weight = self.weights.get(category.lower())
            allocations[category] = (total * weight).quantize(Decimal("0.01")) if weight else per_category
        return allocations


class NoAllocation:
    """Give missing categories a zero budget (percentages read as 0)."""

    def allocate(self, missing: Sequence[str], observed: Sequence[str], total: Decimal) -> dict[str, Decimal]:
        return {category: ZERO for category in missing}


def policy_from_name(name: str) -> BudgetAllocationPolicy:
    """
    Build a policy from its configuration name.

    Raises:
        ValueError: If name is not one of even, weighted, none
    """
    policies: dict[str, type] = {
        "even": EvenSplitAllocation,
        "weighted": WeightedAllocation,
        "none": NoAllocation,
    }
    try:
        return policies[name.strip().lower()]()
    except KeyError:
        raise ValueError(f"Unknown allocation policy: {name}") from None
