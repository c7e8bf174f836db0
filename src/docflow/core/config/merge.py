# src/docflow/core/config/merge.py
"""
Deep-merge de configuração (defaults ← local).

Política:
    - mapa + mapa → merge recursivo por chave
    - list → sobrescrita total (ex.: `inputs.accept` local substitui o default)
    - escalar → o override vence, desde que o tipo seja o mesmo
    - default `None` → aceita override de qualquer tipo ("não definido")

Invariantes:
    - Nenhum input é mutado durante o processo
    - Um conflito de tipo aborta o merge inteiro
"""

from copy import deepcopy
from typing import Any, Dict, List

from .errors import ConfigTypeConflictError


def _merged_value(path: List[str], current: Any, incoming: Any) -> Any:
    if isinstance(current, dict) and isinstance(incoming, dict):
        return _merge_into(deepcopy(current), incoming, path)
    if isinstance(incoming, list) or current is None:
        return deepcopy(incoming)
    if type(current) is not type(incoming):
        raise ConfigTypeConflictError(
            f"Conflito de tipo em '{'.'.join(path)}': "
            f"default {type(current).__name__}, override {type(incoming).__name__}"
        )
    return deepcopy(incoming)


def _merge_into(target: Dict[str, Any], override: Dict[str, Any], path: List[str]) -> Dict[str, Any]:
    for key, incoming in override.items():
        key_path = path + [str(key)]
        target[key] = _merged_value(key_path, target[key], incoming) if key in target else deepcopy(incoming)
    return target


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Retorna um novo dicionário com `override` aplicado sobre `base`.

    Raises:
        ConfigTypeConflictError: Raiz que não é mapa, ou conflito de tipo
            em alguma chave (a mensagem traz o caminho pontuado da chave).
    """
    if not isinstance(base, dict) or not isinstance(override, dict):
        raise ConfigTypeConflictError(
            f"Deep-merge requer mapas na raiz, recebido "
            f"{type(base).__name__} e {type(override).__name__}"
        )
    return _merge_into(deepcopy(base), override, [])
