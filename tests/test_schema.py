import pytest

from nestegg.schema import DEFAULT_WITHDRAWAL_ORDER, SchemaError, load_assumptions
from tests.helpers import base_assumptions_dict, clone_assumptions, write_assumptions


def test_load_assumptions_rejects_non_object_root(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("[]", encoding="utf-8")

    with pytest.raises(SchemaError, match="assumptions: root must be a JSON object"):
        load_assumptions(path)


def test_load_sample_assumptions():
    assumptions = load_assumptions("sample_assumptions.json")

    assert assumptions.current_year == 2025
    assert assumptions.filing_status == "married_filing_jointly"
    assert assumptions.people.spouse is not None
    assert assumptions.accounts.savings.balance == 500000
    assert assumptions.overrides.spending == {66: 25000.0}
    assert assumptions.projection_years == 31


def test_load_assumptions_requires_subject_age(tmp_path, sample_assumptions_dict):
    data = clone_assumptions(sample_assumptions_dict)
    del data["people"]["subject"]["current_age"]
    path = write_assumptions(tmp_path, data)

    with pytest.raises(SchemaError, match=r"people\.subject\.current_age: missing required field"):
        load_assumptions(path)


def test_load_assumptions_requires_top_level_sections(tmp_path, sample_assumptions_dict):
    data = clone_assumptions(sample_assumptions_dict)
    del data["spending"]
    path = write_assumptions(tmp_path, data)

    with pytest.raises(SchemaError, match=r"assumptions\.spending: missing required field"):
        load_assumptions(path)


def test_load_assumptions_rejects_wrong_collection_types(tmp_path, sample_assumptions_dict):
    data = clone_assumptions(sample_assumptions_dict)
    data["withdrawal_order"] = {}
    path = write_assumptions(tmp_path, data)

    with pytest.raises(SchemaError, match=r"withdrawal_order: expected array"):
        load_assumptions(path)


def test_load_assumptions_rejects_invalid_nested_object_type(tmp_path, sample_assumptions_dict):
    data = clone_assumptions(sample_assumptions_dict)
    data["people"]["subject"] = "bad"
    path = write_assumptions(tmp_path, data)

    with pytest.raises(SchemaError, match=r"people\.subject: expected object"):
        load_assumptions(path)


def test_load_assumptions_rejects_non_numeric_balance(tmp_path, sample_assumptions_dict):
    data = clone_assumptions(sample_assumptions_dict)
    data["accounts"]["savings"]["balance"] = "lots"
    path = write_assumptions(tmp_path, data)

    with pytest.raises(SchemaError, match=r"accounts\.savings\.balance: expected number"):
        load_assumptions(path)


def test_load_assumptions_rejects_non_numeric_override_age(tmp_path, sample_assumptions_dict):
    data = clone_assumptions(sample_assumptions_dict)
    data["overrides"]["spending"] = {"sixty": 1000}
    path = write_assumptions(tmp_path, data)

    with pytest.raises(SchemaError, match=r"overrides\.spending\.sixty: age keys must be whole numbers"):
        load_assumptions(path)


def test_optional_sections_take_defaults(tmp_path):
    data = base_assumptions_dict()
    for key in ("employment", "withholding"):
        data.pop(key)
    path = write_assumptions(tmp_path, data)

    assumptions = load_assumptions(path)

    assert assumptions.employment.salary == 0
    assert assumptions.withholding.wages == 0
    assert assumptions.withdrawal_order == list(DEFAULT_WITHDRAWAL_ORDER)
    assert assumptions.rmd.enabled
    assert assumptions.rmd.start_age == 73
    assert assumptions.people.subject.social_security.monthly == 0
    assert assumptions.people.spouse is None


@pytest.mark.parametrize(
    ("mutator", "expected"),
    [
        (lambda d: d["accounts"]["savings"].update({"balance": float("nan")}), r"accounts\.savings\.balance"),
        (lambda d: d["employment"].update({"salary": float("inf")}), r"employment\.salary"),
        (lambda d: d["overrides"]["spending"].update({"66": float("-inf")}), r"overrides\.spending\.66"),
    ],
)
def test_load_assumptions_rejects_non_finite_numbers(tmp_path, sample_assumptions_dict, mutator, expected):
    data = clone_assumptions(sample_assumptions_dict)
    mutator(data)
    path = write_assumptions(tmp_path, data)

    with pytest.raises(SchemaError, match=expected + ": expected finite number"):
        load_assumptions(path)
