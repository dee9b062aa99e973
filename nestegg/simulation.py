"""Projection orchestration: the year loop over working and retirement years."""

from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from .accounts import AccountingYear, AccountsManager
from .calculation import Calculation, Calculations
from .retirement_year import RetirementYearCalculator
from .schema import Assumptions
from .tax import TaxService
from .working_year import WorkingYearCalculator


@dataclass(slots=True)
class ProjectionResult:
    calculations: Calculations
    accounts: AccountsManager
    failed_years: list[int] = field(default_factory=list)

    @property
    def shortfall_years(self) -> list[int]:
        return [calc.fiscal_year for calc in self.calculations if calc.unmet_need > 0]

    @property
    def depletion_year(self) -> int | None:
        """First year whose spending could not be fully covered."""
        years = self.shortfall_years
        return years[0] if years else None

    @property
    def money_lasts(self) -> bool:
        return not self.shortfall_years


def run_projection(
    assumptions: Assumptions,
    *,
    tax_service: TaxService | None = None,
    years: int | None = None,
) -> ProjectionResult:
    """Project every year from ``current_year`` through life expectancy.

    A failure inside a retirement year is logged and that year is left out of
    the calculations; the loop moves on to the next year.
    """
    tax_service = tax_service or TaxService.from_assumptions(assumptions)
    manager = AccountsManager.create_from_inputs(assumptions)
    calculations = Calculations()
    result = ProjectionResult(calculations=calculations, accounts=manager)

    subject = assumptions.people.subject
    total_years = assumptions.projection_years if years is None else min(years, assumptions.projection_years)
    logger.info(
        "Projecting {} years from {} (age {} to {})",
        total_years,
        assumptions.current_year,
        subject.current_age,
        subject.current_age + total_years - 1,
    )

    for year_index in range(total_years):
        fiscal_year = assumptions.current_year + year_index
        age = subject.current_age + year_index
        account_year = AccountingYear(manager, fiscal_year)

        if age < subject.retirement_age:
            year_data = WorkingYearCalculator(assumptions, account_year, year_index, tax_service).process_year_data()
        else:
            try:
                year_data = RetirementYearCalculator(
                    assumptions, account_year, year_index, tax_service
                ).process_year_data()
            except Exception:
                logger.exception("Retirement year {} (age {}) failed; skipping", fiscal_year, age)
                result.failed_years.append(fiscal_year)
                continue

        calculations.add_calculation(Calculation(fiscal_year, year_data))

    last = calculations.get_last_calculation()
    if last is not None:
        logger.info("Projection finished in {} with total balance {:.2f}", last.fiscal_year, last.bal_total)
    return result
