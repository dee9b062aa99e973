import pytest

from nestegg.accounts import AccountsManager
from nestegg.ledger import (
    Account,
    AccountNotFoundError,
    AccountType,
    InterestEpoch,
    InvalidAccountTypeError,
    TransactionCategory,
)
from nestegg.schema import AccountInputs, AccountsInputs
from tests.helpers import make_manager


def _spec_manager() -> AccountsManager:
    return AccountsManager.create_from_inputs(
        AccountsInputs(
            trad_401k=AccountInputs(600000, 0.03),
            roth_ira=AccountInputs(0, 0.0),
            savings=AccountInputs(500000, 0.03),
        )
    )


def test_create_from_inputs_total_starting_balance():
    manager = _spec_manager()

    assert manager.get_total_starting_balance(2025) == 1100000


def test_create_from_inputs_builds_all_seven_accounts():
    manager = _spec_manager()

    accounts = list(manager.accounts())
    assert {account.account_type for account in accounts} == set(AccountType)
    for account_type in (AccountType.INCOME, AccountType.DISBURSEMENT, AccountType.TAXES, AccountType.WITHHOLDINGS):
        account = manager.get_account_by_name(account_type)
        assert account.opening_balance == 0
        assert account.interest_rate == 0
    assert manager.get_account_by_name("trad_401k").interest_rate == 0.03


def test_create_from_inputs_accepts_full_assumptions(sample_assumptions):
    manager = AccountsManager.create_from_inputs(sample_assumptions)

    assert manager.get_account_by_name(AccountType.SAVINGS).opening_balance == 500000


def test_get_accounts_in_order_resolves_tags():
    manager = _spec_manager()

    ordered = manager.get_accounts_in_order(["SAVINGS", "TRADITIONAL_401K"])

    assert ordered == [
        manager.get_account_by_name(AccountType.SAVINGS),
        manager.get_account_by_name(AccountType.TRAD_401K),
    ]


def test_get_accounts_in_order_drops_unknown_tags():
    manager = _spec_manager()

    ordered = manager.get_accounts_in_order(["BROKERAGE", "ROTH_IRA", 7])

    assert ordered == [manager.get_account_by_name(AccountType.ROTH_IRA)]


@pytest.mark.parametrize("order", [None, "SAVINGS", {"first": "ROTH_IRA"}])
def test_get_accounts_in_order_falls_back_to_default(order):
    manager = _spec_manager()

    ordered = manager.get_accounts_in_order(order)

    assert [account.account_type for account in ordered] == [
        AccountType.SAVINGS,
        AccountType.TRAD_401K,
        AccountType.ROTH_IRA,
    ]


def test_get_accounts_in_order_keeps_first_occurrence_and_ignores_case():
    manager = _spec_manager()

    ordered = manager.get_accounts_in_order(["roth_ira", "SAVINGS", "ROTH_IRA"])

    assert [account.account_type for account in ordered] == [AccountType.ROTH_IRA, AccountType.SAVINGS]


def test_get_account_by_name_rejects_unknown_identity():
    manager = _spec_manager()

    with pytest.raises(AccountNotFoundError, match="account not found: 'brokerage'"):
        manager.get_account_by_name("brokerage")


def test_constructor_rejects_unknown_identity():
    accounts = {account_type: Account(account_type) for account_type in AccountType}
    accounts["brokerage"] = Account(AccountType.SAVINGS)

    with pytest.raises(InvalidAccountTypeError, match="brokerage"):
        AccountsManager(accounts)


def test_constructor_requires_complete_account_set():
    accounts = {account_type: Account(account_type) for account_type in AccountType}
    del accounts[AccountType.TAXES]

    with pytest.raises(InvalidAccountTypeError, match="missing taxes"):
        AccountsManager(accounts)


def test_constructor_rejects_mismatched_registration():
    accounts = {account_type: Account(account_type) for account_type in AccountType}
    accounts[AccountType.ROTH_IRA] = Account(AccountType.SAVINGS)

    with pytest.raises(InvalidAccountTypeError, match="registered as 'roth_ira'"):
        AccountsManager(accounts)


def test_totals_fold_over_asset_accounts():
    manager = make_manager(trad_401k=1000, roth_ira=500, savings=200)
    manager.get_account_by_name(AccountType.SAVINGS).deposit_for_year(300, TransactionCategory.CONTRIBUTION, 2025)
    manager.get_account_by_name(AccountType.ROTH_IRA).withdraw_for_year(100, TransactionCategory.CASH_TRANSFER, 2025)
    manager.get_account_by_name(AccountType.DISBURSEMENT).deposit_for_year(999, TransactionCategory.SPEND, 2025)

    assert manager.get_total_starting_balance(2025) == 1700
    assert manager.get_total_deposits(2025) == 300
    assert manager.get_total_withdrawals(2025) == 100
    assert manager.get_total_balance(2025) == 1900
    assert manager.get_balance_breakdown(2025) == {"trad_401k": 1000, "roth_ira": 400, "savings": 500}
    assert manager.has_positive_balance(2025)


def test_total_interest_uses_one_epoch_for_every_account():
    manager = _spec_manager()
    manager.get_account_by_name(AccountType.SAVINGS).deposit_for_year(100000, TransactionCategory.CONTRIBUTION, 2025)

    assert manager.get_total_interest_earned(2025, InterestEpoch.STARTING_BALANCE) == 33000
    assert manager.get_total_interest_earned(2025, InterestEpoch.ENDING_BALANCE) == 36000


def test_has_positive_balance_false_when_everything_is_spent():
    manager = make_manager(savings=100)
    manager.get_account_by_name(AccountType.SAVINGS).withdraw_for_year(100, TransactionCategory.SPEND, 2025)

    assert not manager.has_positive_balance(2025)
