"""Per-year projection snapshots and the ordered collection handed to reporting."""

from __future__ import annotations

from collections.abc import Iterator

from .accounts import AccountingYear
from .ledger import AccountType, TransactionCategory, as_currency
from .year_calculator import EMPLOYER, OTHER, PENSION, SALARY, SOCIAL_SECURITY, TRAD_401K
from .year_data import Demographics, FiscalData, RetirementYearData, YearData


class Calculation:
    """Snapshot of one projected year.

    Every metric is read from the ledger on access, so answers track the ledger
    rather than a copy taken when the year closed.
    """

    def __init__(self, fiscal_year: int, year_data: YearData | None) -> None:
        if year_data is None:
            raise ValueError(f"{fiscal_year}: year data is required")
        self.fiscal_year = fiscal_year
        self.year_data = year_data

    def __repr__(self) -> str:
        return f"Calculation({self.fiscal_year}, {type(self.year_data).__name__})"

    @property
    def year(self) -> int:
        return self.fiscal_year

    @property
    def demographics(self) -> Demographics:
        return self.year_data.demographics

    @property
    def fiscal_data(self) -> FiscalData:
        return self.year_data.fiscal_data

    @property
    def account_year(self) -> AccountingYear:
        return self.year_data.account_year

    @property
    def age(self) -> int:
        return self.demographics.age

    @property
    def is_retirement_year(self) -> bool:
        return isinstance(self.year_data, RetirementYearData)

    def _gross(self, source: str) -> float:
        return self.account_year.get_deposits(AccountType.INCOME, TransactionCategory.INCOME_GROSS, source)

    def _withheld(self, source: str) -> float:
        return self.account_year.get_withdrawals(AccountType.INCOME, TransactionCategory.WITHHOLDINGS, source)

    def _net(self, source: str) -> float:
        return as_currency(self._gross(source) - self._withheld(source))

    # Income by source
    @property
    def salary_gross(self) -> float:
        return self._gross(SALARY)

    @property
    def salary_withholdings(self) -> float:
        return self._withheld(SALARY)

    @property
    def salary_net(self) -> float:
        return self._net(SALARY)

    @property
    def ss_gross(self) -> float:
        return self._gross(SOCIAL_SECURITY)

    @property
    def ss_withholdings(self) -> float:
        return self._withheld(SOCIAL_SECURITY)

    @property
    def ss_net(self) -> float:
        return self._net(SOCIAL_SECURITY)

    @property
    def pension_gross(self) -> float:
        return self._gross(PENSION)

    @property
    def pension_withholdings(self) -> float:
        return self._withheld(PENSION)

    @property
    def pension_net(self) -> float:
        return self._net(PENSION)

    @property
    def trad_401k_gross(self) -> float:
        return self._gross(TRAD_401K)

    @property
    def trad_401k_withholdings(self) -> float:
        return self._withheld(TRAD_401K)

    @property
    def trad_401k_net(self) -> float:
        return self._net(TRAD_401K)

    @property
    def rmd(self) -> float:
        return self.account_year.get_withdrawals(AccountType.TRAD_401K, TransactionCategory.RMD)

    @property
    def savings_withdrawal(self) -> float:
        return self.account_year.get_withdrawals(AccountType.SAVINGS, TransactionCategory.CASH_TRANSFER)

    @property
    def roth_withdrawal(self) -> float:
        return self.account_year.get_withdrawals(AccountType.ROTH_IRA, TransactionCategory.CASH_TRANSFER)

    @property
    def other_income(self) -> float:
        return as_currency(
            self.account_year.get_deposits(AccountType.INCOME, TransactionCategory.OTHER_TAXABLE_INCOME, OTHER)
            + self.account_year.get_deposits(AccountType.INCOME, TransactionCategory.TAX_FREE_INCOME, OTHER)
        )

    @property
    def total_gross_income(self) -> float:
        return as_currency(
            self.salary_gross + self.ss_gross + self.pension_gross + self.trad_401k_gross + self.other_income
        )

    @property
    def total_withholdings(self) -> float:
        return self.account_year.get_deposits(AccountType.WITHHOLDINGS, TransactionCategory.WITHHOLDINGS)

    @property
    def total_net_income(self) -> float:
        return as_currency(
            self.salary_net
            + self.ss_net
            + self.pension_net
            + self.trad_401k_net
            + self.savings_withdrawal
            + self.roth_withdrawal
            + self.other_income
        )

    # Spending and taxes
    @property
    def spend(self) -> float:
        return self.account_year.get_deposits(AccountType.DISBURSEMENT, TransactionCategory.SPEND)

    @property
    def unmet_need(self) -> float:
        return self.year_data.unmet_need

    @property
    def taxes_owed(self) -> float:
        return self.account_year.get_deposits(AccountType.TAXES, TransactionCategory.TAXES)

    @property
    def tax_payment(self) -> float:
        return as_currency(
            self.account_year.get_withdrawals(AccountType.INCOME, TransactionCategory.TAX_PAYMENT)
            + self.account_year.get_withdrawals(AccountType.SAVINGS, TransactionCategory.TAX_PAYMENT)
        )

    @property
    def tax_refund(self) -> float:
        return self.account_year.get_deposits(AccountType.INCOME, TransactionCategory.TAX_REFUND)

    # Contributions
    @property
    def pretax_contribution(self) -> float:
        return self.account_year.get_deposits(AccountType.TRAD_401K, TransactionCategory.CONTRIBUTION, SALARY)

    @property
    def employer_match(self) -> float:
        return self.account_year.get_deposits(AccountType.TRAD_401K, TransactionCategory.EMPLOYER_MATCH, EMPLOYER)

    @property
    def roth_contribution(self) -> float:
        return self.account_year.get_deposits(AccountType.ROTH_IRA, TransactionCategory.CONTRIBUTION, SALARY)

    @property
    def savings_contribution(self) -> float:
        return self.account_year.get_deposits(AccountType.SAVINGS, TransactionCategory.CONTRIBUTION, SALARY)

    @property
    def contributions(self) -> float:
        return as_currency(
            self.pretax_contribution + self.employer_match + self.roth_contribution + self.savings_contribution
        )

    # Balances and growth
    @property
    def bal_savings(self) -> float:
        return self.account_year.get_ending_balance(AccountType.SAVINGS)

    @property
    def bal_trad_401k(self) -> float:
        return self.account_year.get_ending_balance(AccountType.TRAD_401K)

    @property
    def bal_roth(self) -> float:
        return self.account_year.get_ending_balance(AccountType.ROTH_IRA)

    @property
    def bal_total(self) -> float:
        return self.account_year.get_total_balance()

    @property
    def interest_earned(self) -> float:
        return self.account_year.get_total_interest_earned()

    def interest_earned_by_account(self) -> dict[str, float]:
        return {
            account.name: self.account_year.get_interest_earned(account.account_type)
            for account in self.account_year.manager.asset_accounts()
        }

    def as_row(self) -> dict[str, float | int | str]:
        return {
            "year": self.year,
            "age": self.age,
            "phase": "retired" if self.is_retirement_year else "working",
            "gross_income": self.total_gross_income,
            "net_income": self.total_net_income,
            "spend": self.spend,
            "taxes": self.taxes_owed,
            "savings": self.bal_savings,
            "trad_401k": self.bal_trad_401k,
            "roth_ira": self.bal_roth,
            "total": self.bal_total,
        }


class Calculations:
    """Append-only, simulation-ordered sequence of :class:`Calculation`."""

    def __init__(self) -> None:
        self._calculations: list[Calculation] = []

    def add_calculation(self, calculation: Calculation) -> None:
        self._calculations.append(calculation)

    def get_all_calculations(self) -> tuple[Calculation, ...]:
        return tuple(self._calculations)

    def get_last_calculation(self) -> Calculation | None:
        if not self._calculations:
            return None
        return self._calculations[-1]

    def find(self, fiscal_year: int) -> Calculation | None:
        for calculation in self._calculations:
            if calculation.fiscal_year == fiscal_year:
                return calculation
        return None

    def __len__(self) -> int:
        return len(self._calculations)

    def __iter__(self) -> Iterator[Calculation]:
        return iter(self._calculations)
