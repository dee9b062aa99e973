"""Per-year inputs and results shared by the year calculators."""

from __future__ import annotations

from dataclasses import dataclass, field

from .accounts import AccountingYear
from .benefits import BenefitPayment
from .ledger import as_currency
from .schema import Assumptions
from .tax import TaxComputation


@dataclass(slots=True)
class Demographics:
    age: int
    spouse_age: int | None
    filing_status: str
    retirement_age: int
    life_expectancy: int
    rmd_start_age: int

    @property
    def is_rmd_age(self) -> bool:
        return self.age >= self.rmd_start_age

    @classmethod
    def from_assumptions(cls, assumptions: Assumptions, year_index: int) -> "Demographics":
        subject = assumptions.people.subject
        spouse = assumptions.people.spouse
        return cls(
            age=subject.current_age + year_index,
            spouse_age=None if spouse is None else spouse.current_age + year_index,
            filing_status=assumptions.filing_status,
            retirement_age=subject.retirement_age,
            life_expectancy=subject.life_expectancy,
            rmd_start_age=assumptions.rmd.start_age,
        )


@dataclass(slots=True)
class FiscalData:
    tax_year: int
    year_index: int
    inflation_rate: float
    base_spending: float

    @property
    def inflation_factor(self) -> float:
        return (1.0 + self.inflation_rate) ** self.year_index

    def spending_need(self, override: float = 0.0) -> float:
        return as_currency(max(0.0, self.base_spending * self.inflation_factor + override))

    @classmethod
    def from_assumptions(cls, assumptions: Assumptions, year_index: int) -> "FiscalData":
        return cls(
            tax_year=assumptions.current_year + year_index,
            year_index=year_index,
            inflation_rate=assumptions.spending.inflation_rate,
            base_spending=assumptions.spending.annual,
        )


@dataclass(slots=True)
class DrawdownStep:
    account: str
    gross: float
    withholding: float
    net: float


@dataclass(slots=True)
class YearData:
    demographics: Demographics
    fiscal_data: FiscalData
    account_year: AccountingYear
    spend: float = 0.0
    unmet_need: float = 0.0
    tax: TaxComputation | None = None

    @property
    def fiscal_year(self) -> int:
        return self.account_year.fiscal_year


@dataclass(slots=True)
class WorkingYearData(YearData):
    salary: float = 0.0
    pretax_contribution: float = 0.0
    roth_contribution: float = 0.0
    employer_match: float = 0.0
    savings_contribution: float = 0.0


@dataclass(slots=True)
class RetirementYearData(YearData):
    rmd: float = 0.0
    benefits: list[BenefitPayment] = field(default_factory=list)
    drawdown: list[DrawdownStep] = field(default_factory=list)
