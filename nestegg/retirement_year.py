"""Retirement-year cash flow: benefits, mandatory distributions, and ordered drawdown."""

from __future__ import annotations

from loguru import logger

from .benefits import BenefitPayment, benefit_payments
from .ledger import AccountType, TransactionCategory, as_currency
from .rmd import compute_rmd_amount
from .tax import IncomeKind
from .year_calculator import PENSION, SOCIAL_SECURITY, TRAD_401K, YearCalculator
from .year_data import DrawdownStep, RetirementYearData

_BENEFIT_WITHHOLDING = {
    SOCIAL_SECURITY: IncomeKind.SOCIAL_SECURITY,
    PENSION: IncomeKind.PENSION,
}


class RetirementYearCalculator(YearCalculator):
    def _record_benefits(self) -> list[BenefitPayment]:
        payments = benefit_payments(self.assumptions.people, self.year_index)
        for payment in payments:
            self._record_gross_income(payment.gross, payment.source)
            self._withhold(_BENEFIT_WITHHOLDING[payment.source], payment.gross, payment.source)
        return payments

    def _take_required_distribution(self) -> float:
        settings = self.assumptions.rmd
        if not settings.enabled or not self.demographics.is_rmd_age:
            return 0.0

        trad = self.account_year.targeted(AccountType.TRAD_401K)
        required = compute_rmd_amount(trad.starting_balance(), self.age, settings.start_age)
        if required <= 0:
            return 0.0

        result = trad.withdraw(required, TransactionCategory.RMD, AccountType.INCOME.value)
        self._record_gross_income(result.amount, TRAD_401K)
        self._withhold(IncomeKind.TRAD_401K, result.amount, TRAD_401K)
        logger.debug("{}: required distribution {:.2f} at age {}", self.year, result.amount, self.age)
        return result.amount

    def _cover_shortfall(self, need: float) -> list[DrawdownStep]:
        """Draw from accounts in withdrawal order until net cash covers ``need``."""
        steps: list[DrawdownStep] = []
        shortfall = as_currency(need - self._net_cash())
        for targeted in self.account_year.get_accounts_in_order(self.assumptions.withdrawal_order):
            if shortfall <= 0:
                break

            available = targeted.available_funds()
            if available <= 0:
                logger.debug("{}: {} is exhausted, skipping", self.year, targeted.account.name)
                continue

            if targeted.account_type is AccountType.TRAD_401K:
                gross = min(self.tax_service.gross_up(IncomeKind.TRAD_401K, shortfall), available)
                result = targeted.withdraw(gross, TransactionCategory.INCOME_SHORTFALL, AccountType.INCOME.value)
                self._record_gross_income(result.amount, TRAD_401K)
                withheld = self._withhold(IncomeKind.TRAD_401K, result.amount, TRAD_401K)
            else:
                result = self.account_year.transfer(
                    targeted.account_type,
                    AccountType.INCOME,
                    min(shortfall, available),
                    TransactionCategory.CASH_TRANSFER,
                )
                withheld = 0.0

            net = as_currency(result.amount - withheld)
            steps.append(DrawdownStep(account=targeted.account.name, gross=result.amount, withholding=withheld, net=net))
            shortfall = as_currency(shortfall - net)
        return steps

    def _process(self) -> RetirementYearData:
        account_year = self.account_year

        benefits = self._record_benefits()
        other_taxable = self._record_override_income()
        rmd = self._take_required_distribution()

        need = self._spending_need()
        drawdown = self._cover_shortfall(need)
        unmet = self._pay_spending(need)

        interest = self._record_interest()
        ordinary_income = (
            account_year.get_deposits(AccountType.INCOME, TransactionCategory.INCOME_GROSS, PENSION)
            + account_year.get_deposits(AccountType.INCOME, TransactionCategory.INCOME_GROSS, TRAD_401K)
            + other_taxable
            + interest[AccountType.SAVINGS]
        )
        tax = self._settle_taxes(
            ordinary_income=ordinary_income,
            social_security_gross=account_year.get_deposits(
                AccountType.INCOME, TransactionCategory.INCOME_GROSS, SOCIAL_SECURITY
            ),
        )
        self._sweep_surplus()

        return RetirementYearData(
            demographics=self.demographics,
            fiscal_data=self.fiscal_data,
            account_year=account_year,
            spend=need,
            unmet_need=unmet,
            tax=tax,
            rmd=rmd,
            benefits=benefits,
            drawdown=drawdown,
        )
