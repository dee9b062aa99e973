import pytest

from nestegg.schema import WithholdingRates
from nestegg.tax import IncomeKind, TaxService


def _service(filing_status: str = "single", inflation_rate: float = 0.0, **rates) -> TaxService:
    return TaxService(filing_status=filing_status, withholding=WithholdingRates(**rates), inflation_rate=inflation_rate)


def test_federal_tax_walks_brackets():
    assert _service().federal_tax(50000, 2025) == 6053.00


def test_federal_tax_zero_for_non_positive_income():
    assert _service().federal_tax(0, 2025) == 0
    assert _service().federal_tax(-100, 2025) == 0


def test_standard_deduction_is_indexed_from_base_year():
    service = _service(inflation_rate=0.03)

    assert service.standard_deduction(2025) == 14600
    assert service.standard_deduction(2026) == 15038
    assert service.standard_deduction(2020) == 14600


def test_brackets_are_indexed_from_base_year():
    service = _service(filing_status="married_filing_jointly", inflation_rate=0.1)

    upper, rate = service.brackets(2026)[0]
    assert upper == pytest.approx(25520.0)
    assert rate == 0.10
    assert service.brackets(2026)[-1] == (None, 0.37)


def test_unknown_filing_status_falls_back_to_single():
    assert _service(filing_status="head_of_household").standard_deduction(2025) == 14600


@pytest.mark.parametrize(
    ("filing_status", "ss_gross", "other_income", "expected"),
    [
        ("single", 20000, 10000, 0.0),
        ("single", 20000, 20000, 2500.0),
        ("married_filing_jointly", 30000, 30000, 6850.0),
        ("single", 12000, 35000, 10200.0),
        ("single", 0, 90000, 0.0),
    ],
)
def test_taxable_social_security(filing_status, ss_gross, other_income, expected):
    assert _service(filing_status=filing_status).taxable_social_security(ss_gross, other_income) == expected


def test_compute_applies_deduction_and_social_security():
    tax = _service().compute(ordinary_income=35000, social_security_gross=12000, year=2025)

    assert tax.taxable_social_security == 10200
    assert tax.standard_deduction == 14600
    assert tax.taxable_income == 30600
    assert tax.federal_tax == 3440


def test_withholding_and_gross_up_are_inverse():
    service = _service(trad_401k=0.2, wages=0.15)

    assert service.withholding_rate(IncomeKind.WAGES) == 0.15
    assert service.withholding_rate("trad_401k") == 0.2
    assert service.withhold(IncomeKind.TRAD_401K, 10000) == 2000
    assert service.gross_up(IncomeKind.TRAD_401K, 8000) == 10000
    assert service.withhold(IncomeKind.TRAD_401K, -5) == 0


def test_gross_up_rejects_full_withholding():
    with pytest.raises(ValueError, match="withholding rate for trad_401k must be < 1"):
        _service(trad_401k=1.0).gross_up(IncomeKind.TRAD_401K, 100)


def test_from_assumptions_uses_spending_inflation(sample_assumptions):
    service = TaxService.from_assumptions(sample_assumptions)

    assert service.filing_status == "married_filing_jointly"
    assert service.inflation_rate == 0.025
    assert service.withholding_rate(IncomeKind.PENSION) == 0.15
