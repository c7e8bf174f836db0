# src/docflow/core/config/__init__.py

"""
Camada de configuração do docflow.

Este pacote contém as estruturas e utilitários responsáveis por carregar,
mesclar, validar estruturalmente e identificar a configuração de execução
do engine de workflows.

A configuração no docflow é:
    - declarativa
    - determinística
    - separada da definição do grafo

Responsabilidades do pacote:
    - Carregamento de arquivos de configuração (defaults + overrides locais)
    - Resolução de configuração final via deep-merge determinístico
    - Geração de hash canônico para rastreabilidade
    - Leitura tipada das opções do engine (`EngineSettings`)

Limites explícitos:
    - Não valida o grafo
    - Não executa nodes
    - Não depende de UI
"""

from .errors import (
    ConfigError,
    ConfigTypeConflictError,
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .hashing import canonical_hash, compute_config_hash
from .loader import load_config, load_mapping_file
from .merge import deep_merge
from .settings import DEFAULT_ACCEPTED_EXTENSIONS, EngineSettings

__all__ = [
    "ConfigError",
    "ConfigTypeConflictError",
    "DefaultsNotFoundError",
    "InvalidConfigRootTypeError",
    "UnsupportedConfigFormatError",
    "canonical_hash",
    "compute_config_hash",
    "load_config",
    "load_mapping_file",
    "deep_merge",
    "DEFAULT_ACCEPTED_EXTENSIONS",
    "EngineSettings",
]
