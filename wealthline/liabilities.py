"""Liability interest accrual and payment."""

from __future__ import annotations

from dataclasses import dataclass, field

from .schema import FinancialItem


@dataclass(slots=True)
class LiabilityPayment:
    liability_id: str
    interest_charged: float
    principal_paid: float
    remaining_balance: float


@dataclass(slots=True)
class LiabilityResult:
    updated_liabilities: list[FinancialItem] = field(default_factory=list)
    total_payment: float = 0.0
    history: list[LiabilityPayment] = field(default_factory=list)


def amortize_liabilities(
    liabilities: list[FinancialItem],
    available_cashflow: float,
    period_fraction: float = 1.0,
) -> LiabilityResult:
    """Accrue interest for the period, then pay each liability from available cash.

    Payment is the minimum payment for the period, capped at the balance owed
    and at whatever cashflow is left. Earlier liabilities get first claim on
    the cash.
    """
    result = LiabilityResult()
    remaining_cashflow = available_cashflow

    for liability in liabilities:
        interest_charged = liability.value * (liability.interest_rate or 0.0) * period_fraction
        balance = liability.value + interest_charged

        minimum = (liability.minimum_payment or 0.0) * period_fraction
        desired = min(minimum, balance)
        payment = max(0.0, min(desired, max(0.0, remaining_cashflow)))

        balance -= payment
        remaining_cashflow -= payment
        result.total_payment += payment

        result.updated_liabilities.append(liability.with_value(balance))
        result.history.append(
            LiabilityPayment(
                liability_id=liability.id,
                interest_charged=interest_charged,
                principal_paid=payment,
                remaining_balance=balance,
            )
        )

    return result
