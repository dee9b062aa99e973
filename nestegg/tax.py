"""Federal income tax and withholding service."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final

from .ledger import as_currency
from .schema import WithholdingRates

BASE_TAX_YEAR: Final[int] = 2025

FILING_STATUSES: Final[set[str]] = {"single", "married_filing_jointly"}

# Brackets are (upper_bound, marginal_rate). Upper bound None means infinity.
FEDERAL_BRACKETS: Final[dict[str, list[tuple[float | None, float]]]] = {
    "single": [
        (11_600.0, 0.10),
        (47_150.0, 0.12),
        (100_525.0, 0.22),
        (191_950.0, 0.24),
        (243_725.0, 0.32),
        (609_350.0, 0.35),
        (None, 0.37),
    ],
    "married_filing_jointly": [
        (23_200.0, 0.10),
        (94_300.0, 0.12),
        (201_050.0, 0.22),
        (383_900.0, 0.24),
        (487_450.0, 0.32),
        (731_200.0, 0.35),
        (None, 0.37),
    ],
}

STANDARD_DEDUCTIONS: Final[dict[str, float]] = {
    "single": 14_600.0,
    "married_filing_jointly": 29_200.0,
}

# Provisional income thresholds for taxing Social Security; not indexed to inflation.
SS_TAXABLE_THRESHOLDS: Final[dict[str, tuple[float, float]]] = {
    "single": (25_000.0, 34_000.0),
    "married_filing_jointly": (32_000.0, 44_000.0),
}


class IncomeKind(str, Enum):
    WAGES = "wages"
    TRAD_401K = "trad_401k"
    SOCIAL_SECURITY = "social_security"
    PENSION = "pension"


@dataclass(slots=True)
class TaxComputation:
    year: int
    ordinary_income: float
    social_security_gross: float
    taxable_social_security: float
    standard_deduction: float
    taxable_income: float
    federal_tax: float


def _normalize_filing_status(filing_status: str) -> str:
    if filing_status in FILING_STATUSES:
        return filing_status
    return "single"


def _year_factor(year: int, inflation_rate: float) -> float:
    delta = max(0, year - BASE_TAX_YEAR)
    return (1.0 + inflation_rate) ** delta


def _progressive_tax(amount: float, brackets: list[tuple[float | None, float]]) -> float:
    if amount <= 0:
        return 0.0

    remaining = amount
    lower = 0.0
    tax = 0.0
    for upper, rate in brackets:
        if remaining <= 0:
            break
        if upper is None:
            taxable_at_rate = remaining
        else:
            taxable_at_rate = min(remaining, max(0.0, upper - lower))
        tax += taxable_at_rate * rate
        remaining -= taxable_at_rate
        if upper is None:
            break
        lower = upper
    return max(0.0, tax)


class TaxService:
    """Withholding rates per income kind plus an inflation-indexed federal bracket table."""

    def __init__(self, *, filing_status: str, withholding: WithholdingRates, inflation_rate: float = 0.0) -> None:
        self.filing_status = _normalize_filing_status(filing_status)
        self.withholding = withholding
        self.inflation_rate = inflation_rate

    @classmethod
    def from_assumptions(cls, assumptions) -> "TaxService":
        return cls(
            filing_status=assumptions.filing_status,
            withholding=assumptions.withholding,
            inflation_rate=assumptions.spending.inflation_rate,
        )

    def withholding_rate(self, kind: IncomeKind | str) -> float:
        return getattr(self.withholding, IncomeKind(kind).value)

    def withhold(self, kind: IncomeKind | str, gross: float) -> float:
        if gross <= 0:
            return 0.0
        return as_currency(gross * self.withholding_rate(kind))

    def gross_up(self, kind: IncomeKind | str, net: float) -> float:
        """Gross amount whose after-withholding remainder equals ``net``."""
        rate = self.withholding_rate(kind)
        if net <= 0:
            return 0.0
        if rate >= 1.0:
            raise ValueError(f"withholding rate for {IncomeKind(kind).value} must be < 1, got {rate}")
        return as_currency(net / (1.0 - rate))

    def standard_deduction(self, year: int) -> float:
        return as_currency(STANDARD_DEDUCTIONS[self.filing_status] * _year_factor(year, self.inflation_rate))

    def brackets(self, year: int) -> list[tuple[float | None, float]]:
        factor = _year_factor(year, self.inflation_rate)
        return [
            (None if upper is None else upper * factor, rate) for upper, rate in FEDERAL_BRACKETS[self.filing_status]
        ]

    def federal_tax(self, taxable_income: float, year: int) -> float:
        return as_currency(_progressive_tax(taxable_income, self.brackets(year)))

    def taxable_social_security(self, ss_gross: float, other_income: float) -> float:
        """Portion of Social Security benefits included in gross income (provisional income test)."""
        if ss_gross <= 0:
            return 0.0
        first, second = SS_TAXABLE_THRESHOLDS[self.filing_status]
        provisional = other_income + 0.5 * ss_gross
        if provisional <= first:
            return 0.0
        if provisional <= second:
            return as_currency(min(0.5 * ss_gross, 0.5 * (provisional - first)))
        tier_one = min(0.5 * ss_gross, 0.5 * (second - first))
        tier_two = 0.85 * (provisional - second)
        return as_currency(min(0.85 * ss_gross, tier_one + tier_two))

    def compute(self, *, ordinary_income: float, social_security_gross: float, year: int) -> TaxComputation:
        taxable_ss = self.taxable_social_security(social_security_gross, ordinary_income)
        deduction = self.standard_deduction(year)
        taxable_income = as_currency(max(0.0, ordinary_income + taxable_ss - deduction))
        return TaxComputation(
            year=year,
            ordinary_income=as_currency(ordinary_income),
            social_security_gross=as_currency(social_security_gross),
            taxable_social_security=taxable_ss,
            standard_deduction=deduction,
            taxable_income=taxable_income,
            federal_tax=self.federal_tax(taxable_income, year),
        )
