from __future__ import annotations

import os

import pytest

from liftlog.config import (
    ConfigurationError,
    MissingConfigurationError,
    bool_env_var,
    int_env_var,
    require_env_var,
    require_env_vars,
)


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "value")

    result = require_env_vars(["EXAMPLE_VAR"])

    assert result["EXAMPLE_VAR"] == "value"


def test_require_env_vars_raises_when_any_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_VAR", raising=False)
    monkeypatch.delenv("OTHER_MISSING_VAR", raising=False)

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["OTHER_MISSING_VAR", "MISSING_VAR"])

    assert "MISSING_VAR, OTHER_MISSING_VAR" in str(exc.value)
    assert exc.value.names == ("MISSING_VAR", "OTHER_MISSING_VAR")


def test_require_env_var_handles_blank_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "   ")

    with pytest.raises(MissingConfigurationError):
        require_env_var("EXAMPLE_VAR")


def test_require_env_var_reads_current_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TEMP_VAR", "123")

    assert os.getenv("TEMP_VAR") == "123"
    assert require_env_var("TEMP_VAR") == "123"


def test_int_env_var_defaults_when_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("EXAMPLE_INT", raising=False)

    assert int_env_var("EXAMPLE_INT", default=7) == 7

    monkeypatch.setenv("EXAMPLE_INT", " ")
    assert int_env_var("EXAMPLE_INT", default=7) == 7


def test_int_env_var_parses_value(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_INT", " 42 ")

    assert int_env_var("EXAMPLE_INT", default=7, minimum=1) == 42


@pytest.mark.parametrize("raw", ["ten", "1.5"])
def test_int_env_var_rejects_non_integers(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("EXAMPLE_INT", raw)

    with pytest.raises(ConfigurationError, match="must be an integer"):
        int_env_var("EXAMPLE_INT", default=7)


def test_int_env_var_enforces_minimum(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_INT", "0")

    with pytest.raises(ConfigurationError, match=">= 1"):
        int_env_var("EXAMPLE_INT", default=7, minimum=1)


def test_int_env_var_error_names_the_variable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_INT", "ten")

    with pytest.raises(ConfigurationError) as exc:
        int_env_var("EXAMPLE_INT", default=7)

    assert exc.value.variable == "EXAMPLE_INT"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("1", True), ("Yes", True), (" on ", True), ("0", False), ("false", False), ("", True)],
)
def test_bool_env_var(monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool) -> None:
    monkeypatch.setenv("EXAMPLE_FLAG", raw)

    assert bool_env_var("EXAMPLE_FLAG", default=True) is expected


def test_bool_env_var_rejects_unknown_words(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_FLAG", "maybe")

    with pytest.raises(ConfigurationError, match="boolean flag"):
        bool_env_var("EXAMPLE_FLAG")
