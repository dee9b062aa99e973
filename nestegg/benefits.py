"""Social Security and pension benefit streams."""

from __future__ import annotations

from dataclasses import dataclass

from .ledger import as_currency
from .schema import Benefit, People


@dataclass(slots=True)
class BenefitPayment:
    owner: str
    source: str
    gross: float


def years_receiving(benefit: Benefit, age: int) -> int:
    return max(0, age - benefit.start_age)


def annual_benefit(benefit: Benefit, age: int) -> float:
    """Yearly payment at ``age``; COLA compounds once for each full year after the start age."""
    if benefit.monthly <= 0 or age < benefit.start_age:
        return 0.0
    return as_currency(benefit.monthly * 12.0 * (1.0 + benefit.cola) ** years_receiving(benefit, age))


def benefit_payments(people: People, year_index: int) -> list[BenefitPayment]:
    """Benefit payments for every household member in the given projection year."""
    owners = [("subject", people.subject.current_age, people.subject)]
    if people.spouse is not None:
        owners.append(("spouse", people.spouse.current_age, people.spouse))

    payments: list[BenefitPayment] = []
    for owner, current_age, person in owners:
        age = current_age + year_index
        for source, benefit in (("social_security", person.social_security), ("pension", person.pension)):
            gross = annual_benefit(benefit, age)
            if gross > 0:
                payments.append(BenefitPayment(owner=owner, source=source, gross=gross))
    return payments
