"""Philippine progressive income tax (TRAIN law brackets).

Amounts are annualised from the per-period figure, the personal exemption is
taken off, and what remains is taxed bracket by bracket. ``max_income`` of
``None`` marks the open top bracket.
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from decimal import Decimal

PERSONAL_EXEMPTION = Decimal(250000)
MONTHS_PER_YEAR = 12
WORK_DAYS_PER_MONTH = 22
HOURS_PER_DAY = 8

ANNUALISE = {
    "MONTHLY": MONTHS_PER_YEAR,
    "DAILY": WORK_DAYS_PER_MONTH * MONTHS_PER_YEAR,
    "HOURLY": HOURS_PER_DAY * WORK_DAYS_PER_MONTH * MONTHS_PER_YEAR,
}


@dataclass(frozen=True)
class TaxBracket:
    min_income: Decimal
    max_income: Decimal | None
    rate: Decimal

    @property
    def label(self) -> str:
        upper = "∞" if self.max_income is None else f"{self.max_income:,}"
        return f"₱{self.min_income:,} - ₱{upper}"

    def contains(self, amount: Decimal) -> bool:
        return self.min_income <= amount and (
            self.max_income is None or amount <= self.max_income
        )


TAX_BRACKETS = (
    TaxBracket(Decimal(0), Decimal(250000), Decimal(0)),
    TaxBracket(Decimal(250001), Decimal(400000), Decimal(15)),
    TaxBracket(Decimal(400001), Decimal(800000), Decimal(20)),
    TaxBracket(Decimal(800001), Decimal(2000000), Decimal(25)),
    TaxBracket(Decimal(2000001), Decimal(8000000), Decimal(30)),
    TaxBracket(Decimal(8000001), None, Decimal(35)),
)


@dataclass
class TaxCalculation:
    annual_taxable_income: Decimal = Decimal(0)
    monthly_taxable_income: Decimal = Decimal(0)
    annual_tax: Decimal = Decimal(0)
    monthly_tax: Decimal = Decimal(0)
    effective_rate: Decimal = Decimal(0)
    bracket_breakdown: list[dict] = field(default_factory=list)


def annual_income(amount, salary_type: str = "MONTHLY") -> Decimal:
    multiplier = ANNUALISE.get((salary_type or "").upper(), MONTHS_PER_YEAR)
    return Decimal(str(amount)) * multiplier


def calculate_philippine_tax(amount, salary_type: str = "MONTHLY") -> TaxCalculation:
    """Tax owed on ``amount`` earned per ``salary_type`` unit.

    Args:
        amount: earnings for one month (MONTHLY), day (DAILY) or hour (HOURLY).
        salary_type: how ``amount`` is annualised; unknown types count as MONTHLY.

    Returns:
        TaxCalculation with annual/monthly figures and the per-bracket breakdown.
    """
    annual = annual_income(amount, salary_type)
    taxable = max(Decimal(0), annual - PERSONAL_EXEMPTION)
    if taxable <= 0:
        return TaxCalculation()

    total = Decimal(0)
    breakdown = []
    for bracket in TAX_BRACKETS:
        if taxable <= bracket.min_income:
            break
        portion = taxable - bracket.min_income
        if bracket.max_income is not None:
            portion = min(portion, bracket.max_income - bracket.min_income)
        if portion > 0:
            tax = portion * bracket.rate / 100
            total += tax
            breakdown.append(
                {
                    "bracket": bracket.label,
                    "taxable_amount": portion,
                    "tax_rate": bracket.rate,
                    "tax_amount": tax,
                }
            )

    return TaxCalculation(
        annual_taxable_income=taxable,
        monthly_taxable_income=taxable / MONTHS_PER_YEAR,
        annual_tax=total,
        monthly_tax=total / MONTHS_PER_YEAR,
        effective_rate=total / annual * 100,
        bracket_breakdown=breakdown,
    )


def get_tax_bracket_info(annual_income_amount) -> dict:
    taxable = max(Decimal(0), Decimal(str(annual_income_amount)) - PERSONAL_EXEMPTION)
    if taxable <= 0:
        return {
            "bracket": None,
            "is_exempt": True,
            "exemption_amount": PERSONAL_EXEMPTION,
        }
    bracket = next((b for b in TAX_BRACKETS if b.contains(taxable)), None)
    return {
        "bracket": bracket,
        "is_exempt": False,
        "exemption_amount": PERSONAL_EXEMPTION,
    }
