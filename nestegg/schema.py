"""Assumptions schema dataclasses and JSON loading."""

from __future__ import annotations

from dataclasses import dataclass, field
import json
import math
from pathlib import Path
from typing import Any, Final

DEFAULT_WITHDRAWAL_ORDER: Final[tuple[str, ...]] = ("SAVINGS", "TRADITIONAL_401K", "ROTH_IRA")


class SchemaError(ValueError):
    """Raised when raw JSON cannot be parsed into schema objects."""


def _expect_dict(value: Any, path: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise SchemaError(f"{path}: expected object")
    return value


def _expect_list(value: Any, path: str) -> list[Any]:
    if not isinstance(value, list):
        raise SchemaError(f"{path}: expected array")
    return value


def _require(data: dict[str, Any], key: str, path: str) -> Any:
    if key not in data:
        raise SchemaError(f"{path}.{key}: missing required field")
    return data[key]


def _optional(data: dict[str, Any], key: str, default: Any = None) -> Any:
    return data.get(key, default)


def _number(value: Any, path: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SchemaError(f"{path}: expected number")
    if not math.isfinite(value):
        raise SchemaError(f"{path}: expected finite number")
    return float(value)


def _age_table(value: Any, path: str) -> dict[int, float]:
    table: dict[int, float] = {}
    for key, amount in _expect_dict(value, path).items():
        try:
            age = int(key)
        except ValueError:
            raise SchemaError(f"{path}.{key}: age keys must be whole numbers") from None
        table[age] = _number(amount, f"{path}.{key}")
    return table


@dataclass(slots=True)
class Benefit:
    monthly: float = 0.0
    start_age: int = 67
    cola: float = 0.0

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str) -> "Benefit":
        return cls(
            monthly=_number(_require(data, "monthly", path), f"{path}.monthly"),
            start_age=int(_require(data, "start_age", path)),
            cola=_number(_optional(data, "cola", 0.0), f"{path}.cola"),
        )


def _optional_benefit(data: dict[str, Any], key: str, path: str) -> Benefit:
    raw = _optional(data, key)
    if raw is None:
        return Benefit()
    return Benefit.from_dict(_expect_dict(raw, f"{path}.{key}"), f"{path}.{key}")


@dataclass(slots=True)
class Subject:
    current_age: int
    retirement_age: int
    life_expectancy: int
    social_security: Benefit = field(default_factory=Benefit)
    pension: Benefit = field(default_factory=Benefit)

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str) -> "Subject":
        return cls(
            current_age=int(_require(data, "current_age", path)),
            retirement_age=int(_require(data, "retirement_age", path)),
            life_expectancy=int(_require(data, "life_expectancy", path)),
            social_security=_optional_benefit(data, "social_security", path),
            pension=_optional_benefit(data, "pension", path),
        )


@dataclass(slots=True)
class Spouse:
    current_age: int
    social_security: Benefit = field(default_factory=Benefit)
    pension: Benefit = field(default_factory=Benefit)

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str) -> "Spouse":
        return cls(
            current_age=int(_require(data, "current_age", path)),
            social_security=_optional_benefit(data, "social_security", path),
            pension=_optional_benefit(data, "pension", path),
        )


@dataclass(slots=True)
class People:
    subject: Subject
    spouse: Spouse | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str = "people") -> "People":
        subject = Subject.from_dict(_expect_dict(_require(data, "subject", path), f"{path}.subject"), f"{path}.subject")
        spouse_raw = _optional(data, "spouse")
        spouse = None
        if spouse_raw is not None:
            spouse = Spouse.from_dict(_expect_dict(spouse_raw, f"{path}.spouse"), f"{path}.spouse")
        return cls(subject=subject, spouse=spouse)


@dataclass(slots=True)
class Employment:
    salary: float = 0.0
    salary_growth: float = 0.0
    pretax_contribution_rate: float = 0.0
    roth_contribution_rate: float = 0.0
    savings_contribution_rate: float = 0.0
    employer_match_rate: float = 0.0
    employer_match_cap: float = 0.0

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str = "employment") -> "Employment":
        return cls(
            salary=_number(_require(data, "salary", path), f"{path}.salary"),
            **{
                key: _number(_optional(data, key, 0.0), f"{path}.{key}")
                for key in (
                    "salary_growth",
                    "pretax_contribution_rate",
                    "roth_contribution_rate",
                    "savings_contribution_rate",
                    "employer_match_rate",
                    "employer_match_cap",
                )
            },
        )


@dataclass(slots=True)
class AccountInputs:
    balance: float = 0.0
    interest_rate: float = 0.0

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str) -> "AccountInputs":
        return cls(
            balance=_number(_require(data, "balance", path), f"{path}.balance"),
            interest_rate=_number(_optional(data, "interest_rate", 0.0), f"{path}.interest_rate"),
        )


@dataclass(slots=True)
class AccountsInputs:
    trad_401k: AccountInputs
    roth_ira: AccountInputs
    savings: AccountInputs

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str = "accounts") -> "AccountsInputs":
        def _account(key: str) -> AccountInputs:
            raw = _optional(data, key)
            if raw is None:
                return AccountInputs()
            return AccountInputs.from_dict(_expect_dict(raw, f"{path}.{key}"), f"{path}.{key}")

        return cls(trad_401k=_account("trad_401k"), roth_ira=_account("roth_ira"), savings=_account("savings"))


@dataclass(slots=True)
class Spending:
    annual: float
    inflation_rate: float = 0.0

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str = "spending") -> "Spending":
        return cls(
            annual=_number(_require(data, "annual", path), f"{path}.annual"),
            inflation_rate=_number(_optional(data, "inflation_rate", 0.0), f"{path}.inflation_rate"),
        )


@dataclass(slots=True)
class WithholdingRates:
    wages: float = 0.0
    trad_401k: float = 0.0
    social_security: float = 0.0
    pension: float = 0.0

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str = "withholding") -> "WithholdingRates":
        return cls(
            **{
                key: _number(_optional(data, key, 0.0), f"{path}.{key}")
                for key in ("wages", "trad_401k", "social_security", "pension")
            }
        )


@dataclass(slots=True)
class RMDSettings:
    enabled: bool = True
    start_age: int = 73

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str = "rmd") -> "RMDSettings":
        return cls(
            enabled=bool(_optional(data, "enabled", True)),
            start_age=int(_optional(data, "start_age", 73)),
        )


@dataclass(slots=True)
class Overrides:
    spending: dict[int, float] = field(default_factory=dict)
    taxable_income: dict[int, float] = field(default_factory=dict)
    tax_free_income: dict[int, float] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str = "overrides") -> "Overrides":
        return cls(
            spending=_age_table(_optional(data, "spending", {}), f"{path}.spending"),
            taxable_income=_age_table(_optional(data, "taxable_income", {}), f"{path}.taxable_income"),
            tax_free_income=_age_table(_optional(data, "tax_free_income", {}), f"{path}.tax_free_income"),
        )


@dataclass(slots=True)
class Assumptions:
    current_year: int
    filing_status: str
    people: People
    employment: Employment
    accounts: AccountsInputs
    spending: Spending
    withholding: WithholdingRates
    withdrawal_order: list[str]
    rmd: RMDSettings
    overrides: Overrides

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Assumptions":
        employment_raw = _optional(data, "employment")
        return cls(
            current_year=int(_require(data, "current_year", "assumptions")),
            filing_status=_require(data, "filing_status", "assumptions"),
            people=People.from_dict(_expect_dict(_require(data, "people", "assumptions"), "people")),
            employment=(
                Employment()
                if employment_raw is None
                else Employment.from_dict(_expect_dict(employment_raw, "employment"))
            ),
            accounts=AccountsInputs.from_dict(_expect_dict(_require(data, "accounts", "assumptions"), "accounts")),
            spending=Spending.from_dict(_expect_dict(_require(data, "spending", "assumptions"), "spending")),
            withholding=WithholdingRates.from_dict(_expect_dict(_optional(data, "withholding", {}), "withholding")),
            withdrawal_order=[
                str(tag) for tag in _expect_list(
                    _optional(data, "withdrawal_order", list(DEFAULT_WITHDRAWAL_ORDER)), "withdrawal_order"
                )
            ],
            rmd=RMDSettings.from_dict(_expect_dict(_optional(data, "rmd", {}), "rmd")),
            overrides=Overrides.from_dict(_expect_dict(_optional(data, "overrides", {}), "overrides")),
        )

    @property
    def projection_years(self) -> int:
        subject = self.people.subject
        return max(0, subject.life_expectancy - subject.current_age + 1)


def load_assumptions(path: str | Path) -> Assumptions:
    """Load assumptions JSON into strongly-typed dataclasses."""
    source = Path(path)
    raw = json.loads(source.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise SchemaError("assumptions: root must be a JSON object")
    return Assumptions.from_dict(raw)
