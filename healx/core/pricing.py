"""Money arithmetic for purchase orders, invoices and payroll.

Totals are always derived from line items on the server; any aggregate sent
by a client is ignored.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def to_money(value: Decimal | int | float | str) -> Decimal:
    """Convert to a Decimal rounded half-up to cents."""
    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def line_total(quantity: int, unit_price: Decimal | int | float | str) -> Decimal:
    """Return ``quantity x unit_price`` rounded to cents."""
    return to_money(Decimal(quantity) * to_money(unit_price))


def purchase_order_total(lines: Iterable[tuple[int, Decimal]]) -> Decimal:
    """Sum of ``quantity x unit_price`` over (quantity, unit_price) pairs."""
    return to_money(sum((line_total(qty, price) for qty, price in lines), Decimal("0")))


@dataclass(frozen=True)
class InvoiceTotals:
    """Derived amounts of an invoice."""

    subtotal: Decimal
    total_amount: Decimal
    balance: Decimal


def invoice_totals(
    lines: Iterable[tuple[int, Decimal]],
    discount: Decimal | int = 0,
    tax: Decimal | int = 0,
    amount_paid: Decimal | int = 0,
) -> InvoiceTotals:
    """
    Compute invoice subtotal, total and balance.

    ``total = sum(subtotal_i) - discount + tax`` and
    ``balance = total - amount_paid``.

    Raises:
        ValueError: If the discount drives the total below zero or the paid
            amount exceeds the total.
    """
    subtotal = purchase_order_total(lines)
    total = to_money(subtotal - to_money(discount) + to_money(tax))
    if total < 0:
        raise ValueError("Discount cannot exceed the invoice subtotal plus tax")

    paid = to_money(amount_paid)
    if paid > total:
        raise ValueError("Amount paid cannot exceed the total amount")

    return InvoiceTotals(subtotal=subtotal, total_amount=total, balance=to_money(total - paid))


EPF_RATE = Decimal("0.08")
ETF_RATE = Decimal("0.03")


@dataclass(frozen=True)
class PayrollAmounts:
    """Statutory contributions and take-home pay for one payroll entry."""

    epf: Decimal
    etf: Decimal
    net_salary: Decimal


def payroll_amounts(
    gross_salary: Decimal | int,
    bonuses: Decimal | int = 0,
    deductions: Decimal | int = 0,
) -> PayrollAmounts:
    """
    Compute EPF, ETF and net salary.

    EPF is 8% and ETF 3% of the gross salary; both are withheld, so
    ``net = gross + bonuses - deductions - epf - etf``.

    Raises:
        ValueError: If the withholdings exceed what the employee earns.
    """
    gross = to_money(gross_salary)
    epf = to_money(gross * EPF_RATE)
    etf = to_money(gross * ETF_RATE)
    net = to_money(gross + to_money(bonuses) - to_money(deductions) - epf - etf)
    if net < 0:
        raise ValueError("Deductions cannot exceed the salary payable")
    return PayrollAmounts(epf=epf, etf=etf, net_salary=net)
