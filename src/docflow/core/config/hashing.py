# src/docflow/core/config/hashing.py
"""
Hashing canônico de estruturas declarativas do docflow.

O hash gerado representa a **identidade estrutural** de uma configuração
ou de um grafo serializado, e é registrado no manifest de cada run.

Política de hashing (v1):
    - Serialização JSON canônica (chaves ordenadas, separadores compactos)
    - Codificação UTF-8
    - Algoritmo SHA-256

Invariantes:
    - Estruturas equivalentes produzem o mesmo hash
    - O valor gerado é sempre uma string hexadecimal de 64 caracteres
"""

import hashlib
import json
from typing import Any, Dict


def canonical_hash(data: Any) -> str:
    """Gera SHA-256 hexadecimal da serialização JSON canônica de `data`."""
    canonical_json = json.dumps(
        data,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )
    return hashlib.sha256(canonical_json.encode("utf-8")).hexdigest()


def compute_config_hash(config: Dict[str, Any]) -> str:
    """
    Gera um hash determinístico da configuração efetiva do engine.

    Args:
        config (Dict[str, Any]): Configuração efetiva.

    Returns:
        str: Hash SHA-256 hexadecimal da configuração.

    Raises:
        TypeError: Se o objeto fornecido não for um dicionário.
    """
    if not isinstance(config, dict):
        raise TypeError(
            f"Config para hashing deve ser dict, recebido: {type(config).__name__}"
        )
    return canonical_hash(config)
