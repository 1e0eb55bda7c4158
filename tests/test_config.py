"""Tests for configuration loading."""

import pytest

from schoolledger.config import DEFAULT_CONFIG, LedgerConfig, load_config
from schoolledger.domain.errors import ValidationError


def _write(tmp_path, text):
    path = tmp_path / "ledger.toml"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_defaults_without_file(monkeypatch):
    monkeypatch.delenv("SCHOOLLEDGER_CONFIG", raising=False)
    config = load_config()
    assert config is DEFAULT_CONFIG
    assert config.strict_categories is True
    assert config.equity_categories == ("Capital Introduced", "Equity")


def test_override_from_file(tmp_path):
    path = _write(
        tmp_path,
        """
[ledger]
strict_categories = false
receivable_fallback_category = "Sundry Debtors"
capital_expenditure_subcategories = ["Furniture", "Vehicles"]
""",
    )
    config = load_config(path)

    assert config.strict_categories is False
    assert config.receivable_fallback_category == "Sundry Debtors"
    assert config.capital_expenditure_subcategories == ("Furniture", "Vehicles")
    # Untouched keys keep their defaults
    assert config.payable_fallback_category == DEFAULT_CONFIG.payable_fallback_category


def test_flat_file(tmp_path):
    path = _write(tmp_path, 'capital_injection_category = "Capital Introduced"\n')
    assert load_config(path).capital_injection_category == "Capital Introduced"


def test_payroll_category(tmp_path):
    assert (DEFAULT_CONFIG.payroll_category, DEFAULT_CONFIG.payroll_subcategory) == ("Operational Expenses", "Salary")

    path = _write(tmp_path, '[ledger]\npayroll_category = "Staff Costs"\npayroll_subcategory = "Teaching Staff"\n')
    config = load_config(path)
    assert (config.payroll_category, config.payroll_subcategory) == ("Staff Costs", "Teaching Staff")


def test_env_variable(tmp_path, monkeypatch):
    path = _write(tmp_path, 'loans_category = "Borrowings"\n')
    monkeypatch.setenv("SCHOOLLEDGER_CONFIG", path)
    assert load_config().loans_category == "Borrowings"


def test_unknown_key(tmp_path):
    path = _write(tmp_path, 'colour = "blue"\n')
    with pytest.raises(ValidationError, match="Unknown configuration keys: colour"):
        load_config(path)


@pytest.mark.parametrize(
    "text",
    [
        "strict_categories = 1\n",
        "capital_reserve_categories = \"Reserves\"\n",
        "capital_reserve_categories = [1, 2]\n",
        "loans_category = \"  \"\n",
        "loans_category = 5\n",
    ],
)
def test_wrong_types(tmp_path, text):
    with pytest.raises(ValidationError):
        load_config(_write(tmp_path, text))


def test_invalid_toml(tmp_path):
    path = _write(tmp_path, "strict_categories = \n")
    with pytest.raises(ValidationError, match="Could not parse"):
        load_config(path)


def test_config_is_frozen():
    with pytest.raises(Exception):
        LedgerConfig().strict_categories = False
