"""
Django Ledger created by Miguel Sanda <msanda@arrobalytics.com>.
Copyright© EDMA Group Inc licensed under the GPLv3 Agreement.

Contributions to this module:
    * Miguel Sanda <msanda@arrobalytics.com>

Installment allocation walks the unpaid rows of a pay plan in due date order and applies a payment amount against
them. Every visited row is marked as paid. When the payment falls short of the last visited row, the uncovered part of
that row is reported as a leftover amount so the caller can split it into a new unpaid row. The allocation itself does
not persist anything, it only mutates the in-memory rows it was given and reports what happened.
"""
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, List, Optional, Sequence

__all__ = [
    'PayPlanAllocation',
    'allocate_pay_plans',
]


@dataclass
class PayPlanAllocation:
    """
    Result of applying a payment amount to an ordered sequence of pay plan rows.

    Attributes
    ----------
    amount: Decimal
        The amount that was allocated.
    remaining: Decimal
        The amount left after the walk. Zero when the payment matched the visited rows exactly, negative when the last
        visited row was only partially covered, positive when the rows ran out first.
    paid_rows: list
        The rows marked as paid, in walk order.
    current_row:
        The last visited row, None if there were no rows.
    payment_date: date
        The next due date of the owning transaction, None if there were no rows to walk.
    """
    amount: Decimal
    remaining: Decimal
    paid_rows: List[Any] = field(default_factory=list)
    current_row: Optional[Any] = None
    payment_date: Optional[date] = None

    @property
    def leftover_amount(self) -> Optional[Decimal]:
        """
        The uncovered portion of the current row, to be split into a new unpaid row.
        """
        if self.current_row is not None and self.remaining < 0:
            return abs(self.remaining)
        return None

    def has_leftover(self) -> bool:
        return self.leftover_amount is not None

    def get_paid_total(self) -> Decimal:
        return sum((row.amount for row in self.paid_rows), Decimal('0'))


def allocate_pay_plans(pay_plans: Sequence[Any], amount: Decimal) -> PayPlanAllocation:
    """
    Applies a payment amount to pay plan rows.

    Parameters
    ----------
    pay_plans: sequence
        Unpaid rows ordered by payment_date ascending. Each row exposes amount, payment_date and paid.
    amount: Decimal
        The amount to allocate.

    Returns
    -------
    PayPlanAllocation
        The allocation result. paid_total - leftover equals the allocated amount whenever the walk stopped on a row.
    """
    rows = list(pay_plans)
    remaining = amount
    current_idx = None

    for idx, row in enumerate(rows):
        remaining -= row.amount
        row.paid = True
        current_idx = idx
        if remaining <= 0:
            break

    allocation = PayPlanAllocation(amount=amount, remaining=remaining)
    if current_idx is None:
        return allocation

    current_row = rows[current_idx]
    allocation.current_row = current_row
    allocation.paid_rows = rows[:current_idx + 1]

    if remaining == 0:
        try:
            allocation.payment_date = rows[current_idx + 1].payment_date
        except IndexError:
            allocation.payment_date = current_row.payment_date
    else:
        allocation.payment_date = current_row.payment_date

    return allocation
