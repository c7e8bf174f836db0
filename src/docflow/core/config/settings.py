# src/docflow/core/config/settings.py
"""
Leitura tipada das opções do engine a partir da configuração efetiva.

Chaves reconhecidas (v1):
    - outputs.default_extension  → extensão dos nomes derivados do label (padrão: "pdf")
    - outputs.fallback_label     → label usado quando o label do node é vazio
    - outputs.passthrough_prefix → prefixo de nomes para payloads crus sem nome
    - engine.validate_before_run → executa o Validator antes de iniciar a run
    - inputs.accept              → extensões aceitas ao carregar arquivos de entrada

Chaves desconhecidas são ignoradas; tipos inválidos são erro explícito.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from docflow.core.exceptions import EngineConfigurationError


DEFAULT_ACCEPTED_EXTENSIONS: Tuple[str, ...] = (
    ".pdf",
    ".txt",
    ".json",
    ".svg",
    ".epub",
    ".eml",
    ".png",
    ".jpg",
    ".jpeg",
    ".docx",
    ".xlsx",
    ".html",
    ".md",
)


def _section(config: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = (config or {}).get(name, {}) or {}
    if not isinstance(section, dict):
        raise EngineConfigurationError(
            message=f"Seção de configuração '{name}' deve ser um mapa",
            details={"section": name, "received": type(section).__name__},
        )
    return section


def _string(section: Dict[str, Any], key: str, default: str, *, where: str) -> str:
    value = section.get(key, default)
    if not isinstance(value, str) or not value.strip():
        raise EngineConfigurationError(
            message=f"'{where}.{key}' deve ser uma string não vazia",
            details={"key": f"{where}.{key}", "received": repr(value)},
        )
    return value.strip()


def _normalize_extension(ext: str) -> str:
    ext = ext.strip().lower()
    return ext if ext.startswith(".") else f".{ext}"


@dataclass(frozen=True)
class EngineSettings:
    """Opções efetivas do engine (imutáveis durante a run)."""

    default_extension: str = "pdf"
    fallback_label: str = "workflow_node"
    passthrough_prefix: str = "passthrough"
    validate_before_run: bool = True
    accept: Tuple[str, ...] = DEFAULT_ACCEPTED_EXTENSIONS

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]]) -> "EngineSettings":
        outputs = _section(config or {}, "outputs")
        engine = _section(config or {}, "engine")
        inputs = _section(config or {}, "inputs")

        validate = engine.get("validate_before_run", True)
        if not isinstance(validate, bool):
            raise EngineConfigurationError(
                message="'engine.validate_before_run' deve ser booleano",
                details={"received": repr(validate)},
            )

        accept = inputs.get("accept", list(DEFAULT_ACCEPTED_EXTENSIONS))
        if not isinstance(accept, (list, tuple)) or not all(isinstance(a, str) for a in accept):
            raise EngineConfigurationError(
                message="'inputs.accept' deve ser uma lista de extensões",
                details={"received": repr(accept)},
            )

        return cls(
            default_extension=_string(outputs, "default_extension", "pdf", where="outputs").lstrip("."),
            fallback_label=_string(outputs, "fallback_label", "workflow_node", where="outputs"),
            passthrough_prefix=_string(outputs, "passthrough_prefix", "passthrough", where="outputs"),
            validate_before_run=validate,
            accept=tuple(_normalize_extension(a) for a in accept),
        )
