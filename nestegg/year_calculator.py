"""Ledger bookkeeping shared by the working-year and retirement-year calculators."""

from __future__ import annotations

from typing import Final

from loguru import logger

from .accounts import AccountingYear
from .ledger import AccountType, InterestEpoch, TransactionCategory, WithdrawalResult, as_currency
from .schema import Assumptions
from .tax import IncomeKind, TaxComputation, TaxService
from .year_data import Demographics, FiscalData, YearData

# Counterpart labels used to tag income-account entries by source.
SALARY: Final[str] = "salary"
SOCIAL_SECURITY: Final[str] = "social_security"
PENSION: Final[str] = "pension"
TRAD_401K: Final[str] = "trad_401k"
OTHER: Final[str] = "other"
EMPLOYER: Final[str] = "employer"
FEDERAL: Final[str] = "federal"

INTEREST_EPOCHS: Final[dict[AccountType, InterestEpoch]] = {
    AccountType.TRAD_401K: InterestEpoch.AVERAGE_BALANCE,
    AccountType.ROTH_IRA: InterestEpoch.IGNORE_DEPOSITS,
    AccountType.SAVINGS: InterestEpoch.IGNORE_DEPOSITS,
}


class YearCalculator:
    """One simulated year. Instances are single use."""

    def __init__(
        self,
        assumptions: Assumptions,
        account_year: AccountingYear,
        year_index: int,
        tax_service: TaxService | None = None,
    ) -> None:
        self.assumptions = assumptions
        self.account_year = account_year
        self.year_index = year_index
        self.tax_service = tax_service or TaxService.from_assumptions(assumptions)
        self.demographics = Demographics.from_assumptions(assumptions, year_index)
        self.fiscal_data = FiscalData.from_assumptions(assumptions, year_index)
        self._processed = False

    @property
    def year(self) -> int:
        return self.account_year.fiscal_year

    @property
    def age(self) -> int:
        return self.demographics.age

    def process_year_data(self) -> YearData:
        if self._processed:
            raise RuntimeError(f"{type(self).__name__} for {self.year} has already been processed")
        self._processed = True
        logger.debug("{}: processing year {} (age {})", type(self).__name__, self.year, self.age)
        return self._process()

    def _process(self) -> YearData:
        raise NotImplementedError

    def _net_cash(self) -> float:
        return self.account_year.get_ending_balance(AccountType.INCOME)

    def _record_gross_income(self, amount: float, source: str) -> float:
        return self.account_year.deposit(AccountType.INCOME, amount, TransactionCategory.INCOME_GROSS, source)

    def _withhold(self, kind: IncomeKind, gross: float, source: str) -> float:
        amount = self.tax_service.withhold(kind, gross)
        result = self.account_year.transfer(
            AccountType.INCOME, AccountType.WITHHOLDINGS, amount, TransactionCategory.WITHHOLDINGS, source
        )
        return result.amount

    def _record_override_income(self) -> float:
        """Record per-age income overrides; returns the taxable part."""
        overrides = self.assumptions.overrides
        taxable = overrides.taxable_income.get(self.age, 0.0)
        tax_free = overrides.tax_free_income.get(self.age, 0.0)
        if taxable > 0:
            self.account_year.deposit(AccountType.INCOME, taxable, TransactionCategory.OTHER_TAXABLE_INCOME, OTHER)
        if tax_free > 0:
            self.account_year.deposit(AccountType.INCOME, tax_free, TransactionCategory.TAX_FREE_INCOME, OTHER)
        return max(taxable, 0.0)

    def _spending_need(self) -> float:
        return self.fiscal_data.spending_need(self.assumptions.overrides.spending.get(self.age, 0.0))

    def _log_capacity(self, account: AccountType | str, result: WithdrawalResult) -> None:
        if result.capacity_exceeded:
            logger.warning(
                "{}: {} could only cover {:.2f} of {:.2f} requested",
                self.year,
                AccountType.parse(account).value,
                result.amount,
                result.requested,
            )

    def _draw_from_savings(self, amount: float) -> WithdrawalResult:
        result = self.account_year.transfer(
            AccountType.SAVINGS, AccountType.INCOME, amount, TransactionCategory.CASH_TRANSFER
        )
        self._log_capacity(AccountType.SAVINGS, result)
        return result

    def _pay_spending(self, need: float) -> float:
        """Move spending from income to disbursement; returns the unmet remainder."""
        if need <= 0:
            return 0.0
        payable = min(need, max(self._net_cash(), 0.0))
        result = self.account_year.transfer(
            AccountType.INCOME, AccountType.DISBURSEMENT, payable, TransactionCategory.SPEND
        )
        unmet = as_currency(max(0.0, need - result.amount))
        if unmet > 0:
            logger.warning("{}: spending need {:.2f} left {:.2f} unmet", self.year, need, unmet)
        return unmet

    def _record_interest(self) -> dict[AccountType, float]:
        return {
            account_type: self.account_year.record_interest(account_type, epoch)
            for account_type, epoch in INTEREST_EPOCHS.items()
        }

    def _settle_taxes(self, *, ordinary_income: float, social_security_gross: float = 0.0) -> TaxComputation:
        """Book the year's federal tax and settle it against what was withheld."""
        tax = self.tax_service.compute(
            ordinary_income=ordinary_income,
            social_security_gross=social_security_gross,
            year=self.year,
        )
        self.account_year.deposit(AccountType.TAXES, tax.federal_tax, TransactionCategory.TAXES, FEDERAL)
        withheld = self.account_year.get_deposits(AccountType.WITHHOLDINGS, TransactionCategory.WITHHOLDINGS)
        balance_due = as_currency(tax.federal_tax - withheld)

        if balance_due < 0:
            self.account_year.deposit(AccountType.INCOME, -balance_due, TransactionCategory.TAX_REFUND, FEDERAL)
        elif balance_due > 0:
            paid = self.account_year.withdraw(
                AccountType.INCOME, balance_due, TransactionCategory.TAX_PAYMENT, FEDERAL
            ).amount
            remaining = as_currency(balance_due - paid)
            if remaining > 0:
                result = self.account_year.withdraw(
                    AccountType.SAVINGS, remaining, TransactionCategory.TAX_PAYMENT, FEDERAL
                )
                self._log_capacity(AccountType.SAVINGS, result)
        logger.debug(
            "{}: federal tax {:.2f}, withheld {:.2f}, balance due {:.2f}",
            self.year,
            tax.federal_tax,
            withheld,
            balance_due,
        )
        return tax

    def _sweep_surplus(self) -> float:
        """Move cash left in the income account into savings so it closes the year at zero."""
        surplus = self._net_cash()
        if surplus <= 0:
            return 0.0
        return self.account_year.transfer(
            AccountType.INCOME, AccountType.SAVINGS, surplus, TransactionCategory.SURPLUS_INCOME
        ).amount
