from loguru import logger

from nestegg.__main__ import main
from tests.helpers import clone_assumptions, write_assumptions


def test_validate_mode_exits_zero(capsys):
    code = main(["sample_assumptions.json", "--validate"])

    assert code == 0
    assert "Assumptions are valid." in capsys.readouterr().out


def test_invalid_assumptions_return_one(tmp_path, sample_assumptions_dict):
    data = clone_assumptions(sample_assumptions_dict)
    data["filing_status"] = "head_of_household"
    path = write_assumptions(tmp_path, data)

    code = main([str(path), "--validate"])
    assert code == 1


def test_missing_assumptions_file_returns_two(tmp_path, capsys):
    missing = tmp_path / "nope.json"

    code = main([str(missing), "--validate"])

    assert code == 2
    assert "Failed to load assumptions" in capsys.readouterr().err


def test_malformed_assumptions_return_two(tmp_path, sample_assumptions_dict):
    data = clone_assumptions(sample_assumptions_dict)
    data["people"]["subject"] = "bad"
    path = write_assumptions(tmp_path, data)

    assert main([str(path)]) == 2


def test_projection_prints_table_and_summary(capsys):
    code = main(["sample_assumptions.json"])
    out = capsys.readouterr().out

    assert code == 0
    assert "Phase" in out
    assert "2055" in out
    assert "Years: 2025-2055" in out
    assert "Money lasts:" in out


def test_years_limits_the_projection(capsys):
    code = main(["sample_assumptions.json", "--years", "3"])

    assert code == 0
    assert "Years: 2025-2027" in capsys.readouterr().out


def test_non_positive_years_returns_two():
    assert main(["sample_assumptions.json", "--years", "0"]) == 2


def test_summary_mode_skips_the_table(capsys):
    code = main(["sample_assumptions.json", "--summary"])
    out = capsys.readouterr().out

    assert code == 0
    assert "Phase" not in out
    assert "Ending balance: $" in out


def test_log_file_receives_projection_logs(tmp_path):
    log_path = tmp_path / "nestegg.log"

    code = main(["sample_assumptions.json", "--summary", "--log-level", "INFO", "--log-file", str(log_path)])
    logger.remove()

    assert code == 0
    assert "Projecting 31 years from 2025" in log_path.read_text(encoding="utf-8")


def test_non_finite_numbers_return_two(tmp_path, sample_assumptions_dict, capsys):
    data = clone_assumptions(sample_assumptions_dict)
    data["accounts"]["savings"]["balance"] = float("nan")
    path = write_assumptions(tmp_path, data)

    code = main([str(path)])

    assert code == 2
    assert "expected finite number" in capsys.readouterr().err
