import copy
import json
from pathlib import Path

from nestegg.accounts import AccountingYear, AccountsManager
from nestegg.schema import AccountInputs, AccountsInputs, Assumptions


def write_assumptions(tmp_path: Path, data: dict, filename: str = "assumptions.json") -> Path:
    path = tmp_path / filename
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def clone_assumptions(data: dict) -> dict:
    return copy.deepcopy(data)


def base_assumptions_dict() -> dict:
    """Single filer with flat rates and empty accounts; tests override what they need."""
    return {
        "current_year": 2025,
        "filing_status": "single",
        "people": {
            "subject": {"current_age": 40, "retirement_age": 65, "life_expectancy": 90},
        },
        "employment": {
            "salary": 100000,
            "pretax_contribution_rate": 0.1,
            "roth_contribution_rate": 0.05,
            "savings_contribution_rate": 0.05,
            "employer_match_rate": 0.5,
            "employer_match_cap": 0.04,
        },
        "accounts": {
            "trad_401k": {"balance": 0, "interest_rate": 0.0},
            "roth_ira": {"balance": 0, "interest_rate": 0.0},
            "savings": {"balance": 0, "interest_rate": 0.0},
        },
        "spending": {"annual": 50000, "inflation_rate": 0.0},
        "withholding": {"wages": 0.0, "trad_401k": 0.0, "social_security": 0.0, "pension": 0.0},
    }


def build_assumptions(data: dict) -> Assumptions:
    return Assumptions.from_dict(data)


def make_manager(trad_401k: float = 0.0, roth_ira: float = 0.0, savings: float = 0.0, rate: float = 0.0) -> AccountsManager:
    return AccountsManager.create_from_inputs(
        AccountsInputs(
            trad_401k=AccountInputs(trad_401k, rate),
            roth_ira=AccountInputs(roth_ira, rate),
            savings=AccountInputs(savings, rate),
        )
    )


def first_year(assumptions: Assumptions) -> tuple[AccountsManager, AccountingYear]:
    manager = AccountsManager.create_from_inputs(assumptions)
    return manager, AccountingYear(manager, assumptions.current_year)
