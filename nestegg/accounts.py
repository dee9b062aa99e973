"""Household account set, year-bound account views, and per-year routing."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Final

from loguru import logger

from .ledger import (
    Account,
    AccountNotFoundError,
    AccountType,
    InterestEpoch,
    InvalidAccountTypeError,
    TransactionCategory,
    WithdrawalResult,
    as_currency,
)
from .schema import DEFAULT_WITHDRAWAL_ORDER

WITHDRAWAL_ORDER_TAGS: Final[dict[str, AccountType]] = {
    "SAVINGS": AccountType.SAVINGS,
    "TRADITIONAL_401K": AccountType.TRAD_401K,
    "ROTH_IRA": AccountType.ROTH_IRA,
}

ASSET_ACCOUNT_TYPES: Final[tuple[AccountType, ...]] = (
    AccountType.TRAD_401K,
    AccountType.ROTH_IRA,
    AccountType.SAVINGS,
)


class TargetedAccount:
    """An account pinned to one fiscal year."""

    def __init__(self, account: Account, fiscal_year: int) -> None:
        self._account = account
        self.fiscal_year = fiscal_year

    @property
    def account(self) -> Account:
        return self._account

    @property
    def account_type(self) -> AccountType:
        return self._account.account_type

    def starting_balance(self) -> float:
        return self._account.starting_balance_for_year(self.fiscal_year)

    def ending_balance_for_year(self) -> float:
        return self._account.ending_balance_for_year(self.fiscal_year)

    def available_funds(self) -> float:
        return max(self.ending_balance_for_year(), 0.0)

    def deposit(self, amount: float, category: TransactionCategory, counterpart: str | None = None) -> float:
        return self._account.deposit_for_year(amount, category, self.fiscal_year, counterpart)

    def withdraw(self, amount: float, category: TransactionCategory, counterpart: str | None = None) -> WithdrawalResult:
        return self._account.withdraw_for_year(amount, category, self.fiscal_year, counterpart)

    def deposits(self, category: TransactionCategory | None = None) -> float:
        return self._account.deposits_for_year(self.fiscal_year, category)

    def withdrawals(self, category: TransactionCategory | None = None) -> float:
        return self._account.withdrawals_for_year(self.fiscal_year, category)


class AccountsManager:
    """Owns the fixed seven-account set of one household."""

    def __init__(self, accounts: Mapping[AccountType | str, Account]) -> None:
        resolved: dict[AccountType, Account] = {}
        for key, account in accounts.items():
            account_type = AccountType.parse(key)
            if account.account_type is not account_type:
                raise InvalidAccountTypeError(
                    f"account registered as {account_type.value!r} has type {account.account_type.value!r}"
                )
            resolved[account_type] = account

        missing = [account_type.value for account_type in AccountType if account_type not in resolved]
        if missing:
            raise InvalidAccountTypeError(f"accounts: missing {', '.join(missing)}")
        self._accounts = resolved

    @classmethod
    def create_from_inputs(cls, inputs: Any) -> "AccountsManager":
        """Build the account set from assumptions (or their ``accounts`` section)."""
        funded = getattr(inputs, "accounts", inputs)
        accounts = {account_type: Account(account_type) for account_type in AccountType}
        for account_type in ASSET_ACCOUNT_TYPES:
            source = getattr(funded, account_type.value)
            accounts[account_type] = Account(account_type, source.balance, source.interest_rate)
        logger.debug(
            "Created accounts: trad_401k={:.2f} roth_ira={:.2f} savings={:.2f}",
            funded.trad_401k.balance,
            funded.roth_ira.balance,
            funded.savings.balance,
        )
        return cls(accounts)

    def accounts(self) -> Iterator[Account]:
        return iter(self._accounts.values())

    def asset_accounts(self) -> list[Account]:
        return [self._accounts[account_type] for account_type in ASSET_ACCOUNT_TYPES]

    def get_account_by_name(self, identity: AccountType | str) -> Account:
        try:
            account_type = AccountType.parse(identity)
        except InvalidAccountTypeError:
            raise AccountNotFoundError(f"account not found: {identity!r}") from None
        account = self._accounts.get(account_type)
        if account is None:
            raise AccountNotFoundError(f"account not found: {identity!r}")
        return account

    def get_accounts_in_order(self, withdrawal_order: Any) -> list[Account]:
        """Resolve withdrawal-order tags to live accounts.

        Unknown tags are dropped; anything other than a list or tuple falls back
        to the default order.
        """
        if not isinstance(withdrawal_order, (list, tuple)):
            logger.debug("Withdrawal order {!r} is not a list; using default order", withdrawal_order)
            withdrawal_order = DEFAULT_WITHDRAWAL_ORDER

        ordered: list[Account] = []
        for tag in withdrawal_order:
            account_type = WITHDRAWAL_ORDER_TAGS.get(tag.upper()) if isinstance(tag, str) else None
            if account_type is None:
                logger.debug("Ignoring unknown withdrawal order tag {!r}", tag)
                continue
            account = self._accounts[account_type]
            if account not in ordered:
                ordered.append(account)
        return ordered

    def get_total_balance(self, year: int) -> float:
        return as_currency(sum(account.ending_balance_for_year(year) for account in self.asset_accounts()))

    def get_total_starting_balance(self, year: int) -> float:
        return as_currency(sum(account.starting_balance_for_year(year) for account in self.asset_accounts()))

    def get_total_deposits(self, year: int, category: TransactionCategory | None = None) -> float:
        return as_currency(sum(account.deposits_for_year(year, category) for account in self.asset_accounts()))

    def get_total_withdrawals(self, year: int, category: TransactionCategory | None = None) -> float:
        return as_currency(sum(account.withdrawals_for_year(year, category) for account in self.asset_accounts()))

    def get_total_interest_earned(self, year: int, epoch: InterestEpoch | str) -> float:
        return as_currency(
            sum(account.calculate_interest_for_year(epoch, year) for account in self.asset_accounts())
        )

    def has_positive_balance(self, year: int) -> bool:
        return self.get_total_balance(year) > 0

    def get_balance_breakdown(self, year: int) -> dict[str, float]:
        return {account.name: account.ending_balance_for_year(year) for account in self.asset_accounts()}


class AccountingYear:
    """Routes per-account queries and writes for one fiscal year."""

    def __init__(self, manager: AccountsManager, fiscal_year: int) -> None:
        self.manager = manager
        self.fiscal_year = fiscal_year

    def __repr__(self) -> str:
        return f"AccountingYear({self.fiscal_year})"

    def account(self, identity: AccountType | str) -> Account:
        return self.manager.get_account_by_name(identity)

    def targeted(self, identity: AccountType | str) -> TargetedAccount:
        return TargetedAccount(self.account(identity), self.fiscal_year)

    def get_deposits(
        self,
        identity: AccountType | str,
        category: TransactionCategory | None = None,
        counterpart: str | None = None,
    ) -> float:
        return self.account(identity).deposits_for_year(self.fiscal_year, category, counterpart)

    def get_withdrawals(
        self,
        identity: AccountType | str,
        category: TransactionCategory | None = None,
        counterpart: str | None = None,
    ) -> float:
        return self.account(identity).withdrawals_for_year(self.fiscal_year, category, counterpart)

    def deposit(
        self,
        identity: AccountType | str,
        amount: float,
        category: TransactionCategory,
        counterpart: str | None = None,
    ) -> float:
        return self.account(identity).deposit_for_year(amount, category, self.fiscal_year, counterpart)

    def withdraw(
        self,
        identity: AccountType | str,
        amount: float,
        category: TransactionCategory,
        counterpart: str | None = None,
    ) -> WithdrawalResult:
        return self.account(identity).withdraw_for_year(amount, category, self.fiscal_year, counterpart)

    def transfer(
        self,
        source: AccountType | str,
        destination: AccountType | str,
        amount: float,
        category: TransactionCategory,
        counterpart: str | None = None,
    ) -> WithdrawalResult:
        """Move money between two accounts; the destination receives only what the source could give.

        Without an explicit ``counterpart`` each side names the other account.
        """
        source_account = self.account(source)
        destination_account = self.account(destination)
        result = source_account.withdraw_for_year(
            amount, category, self.fiscal_year, counterpart or destination_account.name
        )
        destination_account.deposit_for_year(
            result.amount, category, self.fiscal_year, counterpart or source_account.name
        )
        return result

    def get_starting_balance(self, identity: AccountType | str) -> float:
        return self.account(identity).starting_balance_for_year(self.fiscal_year)

    def get_ending_balance(self, identity: AccountType | str) -> float:
        return self.account(identity).ending_balance_for_year(self.fiscal_year)

    def get_available_funds(self, identities: Iterable[AccountType | str]) -> float:
        return as_currency(sum(self.targeted(identity).available_funds() for identity in identities))

    def calculate_interest(self, identity: AccountType | str, epoch: InterestEpoch | str) -> float:
        return self.account(identity).calculate_interest_for_year(epoch, self.fiscal_year)

    def record_interest(self, identity: AccountType | str, epoch: InterestEpoch | str) -> float:
        return self.account(identity).record_interest_for_year(epoch, self.fiscal_year)

    def get_interest_earned(self, identity: AccountType | str) -> float:
        return self.get_deposits(identity, TransactionCategory.INTEREST)

    def get_accounts_in_order(self, withdrawal_order: Any) -> list[TargetedAccount]:
        return [
            TargetedAccount(account, self.fiscal_year)
            for account in self.manager.get_accounts_in_order(withdrawal_order)
        ]

    def get_total_balance(self) -> float:
        return self.manager.get_total_balance(self.fiscal_year)

    def get_total_starting_balance(self) -> float:
        return self.manager.get_total_starting_balance(self.fiscal_year)

    def get_total_deposits(self, category: TransactionCategory | None = None) -> float:
        return self.manager.get_total_deposits(self.fiscal_year, category)

    def get_total_withdrawals(self, category: TransactionCategory | None = None) -> float:
        return self.manager.get_total_withdrawals(self.fiscal_year, category)

    def get_total_interest_earned(self) -> float:
        return as_currency(sum(self.get_interest_earned(account.account_type) for account in self.manager.asset_accounts()))

    def get_account_summary(self, identity: AccountType | str) -> dict[str, float | str]:
        account = self.account(identity)
        year = self.fiscal_year
        return {
            "account": account.name,
            "starting_balance": account.starting_balance_for_year(year),
            "deposits": account.deposits_for_year(year),
            "withdrawals": account.withdrawals_for_year(year),
            "interest": account.deposits_for_year(year, TransactionCategory.INTEREST),
            "ending_balance": account.ending_balance_for_year(year),
        }

    def get_accounts_summary(self) -> list[dict[str, float | str]]:
        return [self.get_account_summary(account.account_type) for account in self.manager.accounts()]

