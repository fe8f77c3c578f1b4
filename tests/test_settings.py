import pytest

from finance_clarity.settings import DEFAULT_SETTLEMENT_MARKERS, Settings, get_settings


def test_defaults():
    s = Settings()
    assert s.settlement_markers == DEFAULT_SETTLEMENT_MARKERS == ("pagamentos validos normais",)
    assert s.top_outflow_limit == 5
    assert s.concentration_threshold_pct == 40.0
    assert (s.growth_threshold_pct, s.reduction_threshold_pct) == (15.0, -10.0)
    assert s.max_recommendations == 3


def test_from_env_reads_prefixed_variables():
    s = Settings.from_env(
        {
            "FINANCE_CLARITY_SETTLEMENT_MARKERS": " Fatura Paga ; pagamento cartao ;; ",
            "FINANCE_CLARITY_TOP_OUTFLOW_LIMIT": "3",
            "FINANCE_CLARITY_MAX_RECOMMENDATIONS": "2",
            "FINANCE_CLARITY_CONCENTRATION_THRESHOLD": "55.5",
            "FINANCE_CLARITY_GROWTH_THRESHOLD": "20",
            "FINANCE_CLARITY_REDUCTION_THRESHOLD": "-5",
            "FINANCE_CLARITY_DEFAULT_COUNTERPARTY": "Desconhecido",
            "FINANCE_CLARITY_DEFAULT_DESCRIPTION": "Sem descrição",
            "UNRELATED": "x",
        }
    )

    assert s.settlement_markers == ("fatura paga", "pagamento cartao")
    assert s.top_outflow_limit == 3
    assert s.max_recommendations == 2
    assert s.concentration_threshold_pct == 55.5
    assert s.growth_threshold_pct == 20.0
    assert s.reduction_threshold_pct == -5.0
    assert s.default_counterparty == "Desconhecido"
    assert s.default_description == "Sem descrição"


def test_blank_values_keep_defaults():
    s = Settings.from_env({"FINANCE_CLARITY_TOP_OUTFLOW_LIMIT": "  "})
    assert s == Settings()


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("FINANCE_CLARITY_TOP_OUTFLOW_LIMIT", "five"),
        ("FINANCE_CLARITY_GROWTH_THRESHOLD", "lots"),
    ],
)
def test_invalid_numbers_name_the_variable(name, value):
    with pytest.raises(ValueError, match=name):
        Settings.from_env({name: value})


def test_negative_limits_are_rejected():
    with pytest.raises(ValueError):
        Settings(top_outflow_limit=-1)
    with pytest.raises(ValueError):
        Settings.from_env({"FINANCE_CLARITY_MAX_RECOMMENDATIONS": "-2"})


def test_get_settings_reads_os_environ_once(monkeypatch):
    monkeypatch.setenv("FINANCE_CLARITY_TOP_OUTFLOW_LIMIT", "7")
    first = get_settings()
    monkeypatch.setenv("FINANCE_CLARITY_TOP_OUTFLOW_LIMIT", "9")

    assert first.top_outflow_limit == 7
    assert get_settings() is first
