# tests/core/config/test_engine_settings.py
"""
Testes da leitura tipada da configuração (`EngineSettings.from_config`).

Os testes asseguram que:
- a configuração vazia produz os defaults canônicos de nomeação
- overrides são normalizados (extensão sem ponto, accept em minúsculas)
- tipos inválidos são rejeitados com `EngineConfigurationError`
"""

import pytest

try:
    from docflow.core.config.settings import DEFAULT_ACCEPTED_EXTENSIONS, EngineSettings
    from docflow.core.exceptions import EngineConfigurationError
except Exception as e:  # noqa: BLE001
    EngineSettings = None
    DEFAULT_ACCEPTED_EXTENSIONS = None
    EngineConfigurationError = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"Missing EngineSettings. Import error: {_IMPORT_ERR}")


def test_empty_config_yields_defaults():
    """
    Verifica os defaults canônicos quando nenhuma chave é informada.

    Invariantes:
        - extensão padrão "pdf"
        - label de fallback "workflow_node"
        - prefixo de passthrough "passthrough"
        - validação pré-run habilitada
    """
    _require_imports()
    settings = EngineSettings.from_config({})
    assert settings == EngineSettings()
    assert settings.default_extension == "pdf"
    assert settings.fallback_label == "workflow_node"
    assert settings.passthrough_prefix == "passthrough"
    assert settings.validate_before_run is True
    assert settings.accept == DEFAULT_ACCEPTED_EXTENSIONS


def test_none_config_yields_defaults():
    _require_imports()
    assert EngineSettings.from_config(None) == EngineSettings()


def test_overrides_are_normalized():
    _require_imports()
    settings = EngineSettings.from_config(
        {
            "outputs": {"default_extension": ".png", "fallback_label": " step "},
            "engine": {"validate_before_run": False},
            "inputs": {"accept": ["PDF", ".Txt"]},
        }
    )
    assert settings.default_extension == "png"
    assert settings.fallback_label == "step"
    assert settings.validate_before_run is False
    assert settings.accept == (".pdf", ".txt")


@pytest.mark.parametrize(
    "config",
    [
        {"outputs": []},
        {"outputs": {"default_extension": ""}},
        {"outputs": {"fallback_label": 3}},
        {"engine": {"validate_before_run": "yes"}},
        {"inputs": {"accept": ".pdf"}},
        {"inputs": {"accept": [".pdf", 1]}},
    ],
)
def test_invalid_values_raise(config):
    _require_imports()
    with pytest.raises(EngineConfigurationError):
        EngineSettings.from_config(config)
