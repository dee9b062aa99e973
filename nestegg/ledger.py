"""Transaction ledger and time-sliced account balances."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
import math
from typing import Final

CENT: Final[Decimal] = Decimal("0.01")


class LedgerError(ValueError):
    """Raised when the ledger is asked to do something it cannot represent."""


class InvalidAmountError(LedgerError):
    pass


class InvalidAccountTypeError(LedgerError):
    pass


class AccountNotFoundError(LedgerError):
    pass


def as_currency(value: float) -> float:
    """Round half-up to whole cents."""
    return float(Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP))


class AccountType(str, Enum):
    TRAD_401K = "trad_401k"
    ROTH_IRA = "roth_ira"
    SAVINGS = "savings"
    INCOME = "income"
    DISBURSEMENT = "disbursement"
    TAXES = "taxes"
    WITHHOLDINGS = "withholdings"

    @classmethod
    def parse(cls, value: AccountType | str) -> AccountType:
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidAccountTypeError(f"unknown account type: {value!r}") from None


class TransactionKind(str, Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"


class TransactionCategory(str, Enum):
    INCOME_GROSS = "Gross"
    OTHER_TAXABLE_INCOME = "Other Taxable Income"
    TAX_FREE_INCOME = "Tax Free Income"
    WITHHOLDINGS = "Withholdings"
    CONTRIBUTION = "Contribution"
    EMPLOYER_MATCH = "Employer Match"
    INTEREST = "Interest"
    CASH_TRANSFER = "Cash Transfer"
    INCOME_SHORTFALL = "Income Shortfall"
    SPEND = "Spend"
    RMD = "RMD"
    TAXES = "Taxes"
    TAX_PAYMENT = "Tax Payment"
    TAX_REFUND = "Tax Refund"
    SURPLUS_INCOME = "Surplus Income"


class InterestEpoch(str, Enum):
    STARTING_BALANCE = "starting_balance"
    IGNORE_DEPOSITS = "ignore_deposits"
    IGNORE_WITHDRAWALS = "ignore_withdrawals"
    AVERAGE_BALANCE = "average_balance"
    ENDING_BALANCE = "ending_balance"


@dataclass(frozen=True, slots=True)
class Transaction:
    amount: float
    kind: TransactionKind
    category: TransactionCategory
    fiscal_year: int
    counterpart: str | None = None

    @property
    def date(self) -> date:
        return date(self.fiscal_year, 1, 1)

    @property
    def signed_amount(self) -> float:
        if self.kind is TransactionKind.DEPOSIT:
            return self.amount
        return -self.amount

    def matches(self, category: TransactionCategory | None, counterpart: str | None) -> bool:
        if category is not None and self.category is not category:
            return False
        if counterpart is not None and self.counterpart != counterpart:
            return False
        return True


@dataclass(frozen=True, slots=True)
class WithdrawalResult:
    """Outcome of a capacity-checked withdrawal.

    ``amount`` is what was actually recorded; callers book that, never ``requested``.
    """

    requested: float
    amount: float
    capacity_exceeded: bool = False

    @property
    def shortfall(self) -> float:
        return as_currency(max(0.0, self.requested - self.amount))


@dataclass(frozen=True, slots=True)
class RegisterEntry:
    fiscal_year: int
    kind: TransactionKind
    category: TransactionCategory
    counterpart: str | None
    amount: float
    balance: float


class Account:
    """A named pool of money whose balances are replayed from an append-only ledger."""

    def __init__(self, account_type: AccountType | str, opening_balance: float = 0.0, interest_rate: float = 0.0) -> None:
        self.account_type = AccountType.parse(account_type)
        if not math.isfinite(opening_balance) or opening_balance < 0:
            raise InvalidAmountError(f"{self.name}: opening balance must be finite and >= 0, got {opening_balance}")
        self.opening_balance = as_currency(opening_balance)
        self.interest_rate = float(interest_rate)
        self._ledger: list[Transaction] = []

    @property
    def name(self) -> str:
        return self.account_type.value

    def __repr__(self) -> str:
        return (
            f"Account({self.name!r}, opening_balance={self.opening_balance}, "
            f"interest_rate={self.interest_rate}, transactions={len(self._ledger)})"
        )

    def _check_amount(self, amount: float) -> None:
        if not math.isfinite(amount) or amount < 0:
            raise InvalidAmountError(f"{self.name}: amount must be finite and >= 0, got {amount}")

    def _ordered(self) -> list[Transaction]:
        return sorted(self._ledger, key=lambda txn: txn.fiscal_year)

    def _replay(self, year: int, *, inclusive: bool, category: TransactionCategory | None = None) -> float:
        total = 0.0
        for txn in self._ordered():
            if txn.fiscal_year > year or (not inclusive and txn.fiscal_year == year):
                break
            if category is not None and txn.category is not category:
                continue
            total += txn.signed_amount
        return total

    def _starting(self, year: int) -> float:
        return self.opening_balance + self._replay(year, inclusive=False)

    def _ending(self, year: int) -> float:
        return self.opening_balance + self._replay(year, inclusive=True)

    def _sum_for_year(
        self,
        year: int,
        kind: TransactionKind,
        category: TransactionCategory | None = None,
        counterpart: str | None = None,
    ) -> float:
        return sum(
            txn.amount
            for txn in self._ledger
            if txn.fiscal_year == year and txn.kind is kind and txn.matches(category, counterpart)
        )

    def deposit_for_year(
        self,
        amount: float,
        category: TransactionCategory,
        year: int,
        counterpart: str | None = None,
    ) -> float:
        self._check_amount(amount)
        amount = as_currency(amount)
        if amount == 0:
            return 0.0
        self._ledger.append(Transaction(amount, TransactionKind.DEPOSIT, category, year, counterpart))
        return amount

    def withdraw_for_year(
        self,
        amount: float,
        category: TransactionCategory,
        year: int,
        counterpart: str | None = None,
    ) -> WithdrawalResult:
        self._check_amount(amount)
        requested = as_currency(amount)
        available = as_currency(max(self._ending(year), 0.0))
        actual = min(requested, available)
        if actual > 0:
            self._ledger.append(Transaction(actual, TransactionKind.WITHDRAWAL, category, year, counterpart))
        return WithdrawalResult(requested=requested, amount=actual, capacity_exceeded=requested > available)

    def starting_balance_for_year(self, year: int, category: TransactionCategory | None = None) -> float:
        if category is None:
            return as_currency(self._starting(year))
        return as_currency(self._replay(year, inclusive=False, category=category))

    def ending_balance_for_year(self, year: int, category: TransactionCategory | None = None) -> float:
        if category is None:
            return as_currency(self._ending(year))
        return as_currency(self._replay(year, inclusive=True, category=category))

    def deposits_for_year(
        self,
        year: int,
        category: TransactionCategory | None = None,
        counterpart: str | None = None,
    ) -> float:
        return as_currency(self._sum_for_year(year, TransactionKind.DEPOSIT, category, counterpart))

    def withdrawals_for_year(
        self,
        year: int,
        category: TransactionCategory | None = None,
        counterpart: str | None = None,
    ) -> float:
        return as_currency(self._sum_for_year(year, TransactionKind.WITHDRAWAL, category, counterpart))

    def net_change_for_year(self, year: int, category: TransactionCategory | None = None) -> float:
        deposits = self._sum_for_year(year, TransactionKind.DEPOSIT, category)
        withdrawals = self._sum_for_year(year, TransactionKind.WITHDRAWAL, category)
        return as_currency(deposits - withdrawals)

    def transactions_for_year(self, year: int, kind: TransactionKind | None = None) -> list[Transaction]:
        return [txn for txn in self._ledger if txn.fiscal_year == year and (kind is None or txn.kind is kind)]

    def calculate_interest_for_year(self, epoch: InterestEpoch | str, year: int) -> float:
        """Return ``base * interest_rate`` where the base depends on the accrual epoch."""
        epoch = InterestEpoch(epoch)
        start = self._starting(year)
        if epoch is InterestEpoch.STARTING_BALANCE:
            base = start
        elif epoch is InterestEpoch.IGNORE_DEPOSITS:
            base = start - self._sum_for_year(year, TransactionKind.WITHDRAWAL)
        elif epoch is InterestEpoch.IGNORE_WITHDRAWALS:
            base = start + self._sum_for_year(year, TransactionKind.DEPOSIT)
        elif epoch is InterestEpoch.AVERAGE_BALANCE:
            base = (start + self._ending(year)) / 2.0
        else:
            base = self._ending(year)

        if base <= 0:
            return 0.0
        return as_currency(base * self.interest_rate)

    def record_interest_for_year(self, epoch: InterestEpoch | str, year: int) -> float:
        interest = self.calculate_interest_for_year(epoch, year)
        return self.deposit_for_year(interest, TransactionCategory.INTEREST, year)

    def register_for_year(self, year: int) -> list[RegisterEntry]:
        """Transactions for ``year`` in posting order with a running balance."""
        balance = self._starting(year)
        entries: list[RegisterEntry] = []
        for txn in self.transactions_for_year(year):
            balance += txn.signed_amount
            entries.append(
                RegisterEntry(
                    fiscal_year=txn.fiscal_year,
                    kind=txn.kind,
                    category=txn.category,
                    counterpart=txn.counterpart,
                    amount=as_currency(txn.amount),
                    balance=as_currency(balance),
                )
            )
        return entries
