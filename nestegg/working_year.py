"""Working-year cash flow: salary, payroll withholding, and retirement contributions."""

from __future__ import annotations

from typing import Final

from loguru import logger

from .ledger import AccountType, TransactionCategory, as_currency
from .tax import IncomeKind
from .year_calculator import EMPLOYER, SALARY, YearCalculator
from .year_data import WorkingYearData

ELECTIVE_DEFERRAL_LIMIT: Final[float] = 23_000.0
CATCH_UP_CONTRIBUTION: Final[float] = 7_500.0
CATCH_UP_AGE: Final[int] = 50


def elective_deferral_limit(age: int) -> float:
    if age >= CATCH_UP_AGE:
        return ELECTIVE_DEFERRAL_LIMIT + CATCH_UP_CONTRIBUTION
    return ELECTIVE_DEFERRAL_LIMIT


class WorkingYearCalculator(YearCalculator):
    def salary(self) -> float:
        employment = self.assumptions.employment
        return as_currency(employment.salary * (1.0 + employment.salary_growth) ** self.year_index)

    def elective_contributions(self, salary: float) -> tuple[float, float]:
        """Pre-tax and Roth deferrals, scaled together so they fit under the elective limit."""
        employment = self.assumptions.employment
        desired_pretax = salary * employment.pretax_contribution_rate
        desired_roth = salary * employment.roth_contribution_rate
        desired_total = desired_pretax + desired_roth
        if desired_total <= 0:
            return 0.0, 0.0
        scale = min(1.0, elective_deferral_limit(self.age) / desired_total)
        if scale < 1.0:
            logger.debug("{}: scaling elective deferrals by {:.4f} to stay under the limit", self.year, scale)
        return as_currency(desired_pretax * scale), as_currency(desired_roth * scale)

    def employer_match(self, salary: float) -> float:
        employment = self.assumptions.employment
        matched_rate = min(employment.pretax_contribution_rate, employment.employer_match_cap)
        return as_currency(matched_rate * salary * employment.employer_match_rate)

    def _process(self) -> WorkingYearData:
        account_year = self.account_year
        employment = self.assumptions.employment

        salary = self.salary()
        self._record_gross_income(salary, SALARY)

        pretax, roth = self.elective_contributions(salary)
        pretax = account_year.transfer(
            AccountType.INCOME, AccountType.TRAD_401K, pretax, TransactionCategory.CONTRIBUTION, SALARY
        ).amount
        match = account_year.deposit(
            AccountType.TRAD_401K, self.employer_match(salary), TransactionCategory.EMPLOYER_MATCH, EMPLOYER
        )

        self._withhold(IncomeKind.WAGES, salary - pretax, SALARY)
        roth = account_year.transfer(
            AccountType.INCOME, AccountType.ROTH_IRA, roth, TransactionCategory.CONTRIBUTION, SALARY
        ).amount

        other_taxable = self._record_override_income()
        need = self._spending_need()

        desired_savings = salary * employment.savings_contribution_rate
        savings = as_currency(min(desired_savings, max(self._net_cash() - need, 0.0)))
        savings = account_year.transfer(
            AccountType.INCOME, AccountType.SAVINGS, savings, TransactionCategory.CONTRIBUTION, SALARY
        ).amount

        shortfall = as_currency(need - self._net_cash())
        if shortfall > 0:
            self._draw_from_savings(shortfall)
        unmet = self._pay_spending(need)

        interest = self._record_interest()
        tax = self._settle_taxes(ordinary_income=salary - pretax + other_taxable + interest[AccountType.SAVINGS])
        self._sweep_surplus()

        return WorkingYearData(
            demographics=self.demographics,
            fiscal_data=self.fiscal_data,
            account_year=account_year,
            spend=need,
            unmet_need=unmet,
            tax=tax,
            salary=salary,
            pretax_contribution=pretax,
            roth_contribution=roth,
            employer_match=match,
            savings_contribution=savings,
        )
