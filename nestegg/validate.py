"""Semantic validation for projection assumptions."""

from __future__ import annotations

from dataclasses import dataclass, field

from .accounts import WITHDRAWAL_ORDER_TAGS
from .rmd import UNIFORM_LIFETIME_DIVISORS
from .schema import Assumptions, Benefit
from .tax import FILING_STATUSES

SS_EARLIEST_CLAIM_AGE = 62
SS_LATEST_CLAIM_AGE = 70


@dataclass(slots=True)
class ValidationResult:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _check_rate(value: float, path: str, errors: list[str], *, upper: float = 1.0) -> None:
    if value < 0:
        errors.append(f"{path}: must be >= 0")
    elif value > upper:
        errors.append(f"{path}: must be <= {upper:g}")


def _check_non_negative(value: float, path: str, errors: list[str]) -> None:
    if value < 0:
        errors.append(f"{path}: must be >= 0")


def _check_benefit(benefit: Benefit, path: str, errors: list[str], warnings: list[str], *, social_security: bool) -> None:
    _check_non_negative(benefit.monthly, f"{path}.monthly", errors)
    _check_rate(benefit.cola, f"{path}.cola", errors, upper=0.2)
    if social_security and benefit.monthly > 0 and not SS_EARLIEST_CLAIM_AGE <= benefit.start_age <= SS_LATEST_CLAIM_AGE:
        warnings.append(
            f"{path}.start_age: Social Security is normally claimed between {SS_EARLIEST_CLAIM_AGE} and {SS_LATEST_CLAIM_AGE}"
        )


def _validate_people(assumptions: Assumptions, errors: list[str], warnings: list[str]) -> None:
    subject = assumptions.people.subject
    if subject.current_age < 0:
        errors.append("people.subject.current_age: must be >= 0")
    if subject.retirement_age < subject.current_age:
        warnings.append("people.subject.retirement_age: already retired; projection starts in retirement")
    if subject.life_expectancy < subject.current_age:
        errors.append("people.subject.life_expectancy: must be >= current_age")
    if subject.life_expectancy < subject.retirement_age:
        warnings.append("people.subject.life_expectancy: ends before retirement_age")
    _check_benefit(subject.social_security, "people.subject.social_security", errors, warnings, social_security=True)
    _check_benefit(subject.pension, "people.subject.pension", errors, warnings, social_security=False)

    spouse = assumptions.people.spouse
    if spouse is None:
        if assumptions.filing_status == "married_filing_jointly":
            warnings.append("people.spouse: filing jointly without a spouse")
        return
    if spouse.current_age < 0:
        errors.append("people.spouse.current_age: must be >= 0")
    _check_benefit(spouse.social_security, "people.spouse.social_security", errors, warnings, social_security=True)
    _check_benefit(spouse.pension, "people.spouse.pension", errors, warnings, social_security=False)


def _validate_employment(assumptions: Assumptions, errors: list[str], warnings: list[str]) -> None:
    employment = assumptions.employment
    _check_non_negative(employment.salary, "employment.salary", errors)
    _check_rate(employment.salary_growth, "employment.salary_growth", errors, upper=0.5)
    for key in (
        "pretax_contribution_rate",
        "roth_contribution_rate",
        "savings_contribution_rate",
        "employer_match_rate",
        "employer_match_cap",
    ):
        _check_rate(getattr(employment, key), f"employment.{key}", errors)

    deferral = (
        employment.pretax_contribution_rate
        + employment.roth_contribution_rate
        + employment.savings_contribution_rate
    )
    if deferral > 1.0:
        errors.append("employment: contribution rates must not exceed 100% of salary combined")

    subject = assumptions.people.subject
    if subject.current_age < subject.retirement_age and employment.salary == 0:
        warnings.append("employment.salary: working years with no salary")


def _validate_withdrawal_order(assumptions: Assumptions, errors: list[str], warnings: list[str]) -> None:
    order = assumptions.withdrawal_order
    if not order:
        warnings.append("withdrawal_order: empty; shortfalls will not be drawn from any account")
        return
    seen: set[str] = set()
    for idx, tag in enumerate(order):
        key = tag.upper()
        if key not in WITHDRAWAL_ORDER_TAGS:
            warnings.append(f"withdrawal_order[{idx}]: unknown account tag {tag!r} will be ignored")
        elif key in seen:
            warnings.append(f"withdrawal_order[{idx}]: duplicate account tag {tag!r}")
        seen.add(key)


def _validate_overrides(assumptions: Assumptions, errors: list[str], warnings: list[str]) -> None:
    subject = assumptions.people.subject
    overrides = assumptions.overrides
    for name, table in (
        ("spending", overrides.spending),
        ("taxable_income", overrides.taxable_income),
        ("tax_free_income", overrides.tax_free_income),
    ):
        for age, amount in sorted(table.items()):
            if name != "spending":
                _check_non_negative(amount, f"overrides.{name}.{age}", errors)
            if not subject.current_age <= age <= subject.life_expectancy:
                warnings.append(f"overrides.{name}.{age}: outside the projected ages")


def validate_assumptions(assumptions: Assumptions) -> ValidationResult:
    errors: list[str] = []
    warnings: list[str] = []

    if assumptions.filing_status not in FILING_STATUSES:
        errors.append(f"filing_status: must be one of {sorted(FILING_STATUSES)}")

    _validate_people(assumptions, errors, warnings)
    _validate_employment(assumptions, errors, warnings)

    for key in ("trad_401k", "roth_ira", "savings"):
        account = getattr(assumptions.accounts, key)
        _check_non_negative(account.balance, f"accounts.{key}.balance", errors)
        _check_rate(account.interest_rate, f"accounts.{key}.interest_rate", errors, upper=0.5)

    _check_non_negative(assumptions.spending.annual, "spending.annual", errors)
    _check_rate(assumptions.spending.inflation_rate, "spending.inflation_rate", errors, upper=0.2)

    for key in ("wages", "trad_401k", "social_security", "pension"):
        rate = getattr(assumptions.withholding, key)
        if rate < 0 or rate >= 1:
            errors.append(f"withholding.{key}: must be >= 0 and < 1")

    if assumptions.rmd.enabled:
        earliest = min(UNIFORM_LIFETIME_DIVISORS)
        if assumptions.rmd.start_age < earliest:
            errors.append(f"rmd.start_age: must be >= {earliest}")
        elif assumptions.rmd.start_age > 75:
            warnings.append("rmd.start_age: required distributions normally begin by age 75")

    _validate_withdrawal_order(assumptions, errors, warnings)
    _validate_overrides(assumptions, errors, warnings)

    return ValidationResult(errors=errors, warnings=warnings)
