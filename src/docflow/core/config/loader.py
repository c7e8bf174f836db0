# src/docflow/core/config/loader.py
"""
Leitura de documentos de configuração do docflow.

A configuração efetiva de uma run nasce de dois documentos:
    - `config.defaults.*`: base obrigatória, versionada com o projeto
    - `config.local.*`: overrides opcionais do operador

O mesmo leitor de documentos (`load_mapping_file`) é reutilizado pelo
loader de grafos, de modo que YAML e JSON sejam aceitos de forma
idêntica em todo o pacote.

Invariantes:
    - A raiz de qualquer documento é um mapa
    - Um documento vazio equivale a `{}`
    - O local nunca muta os defaults (ver `merge.deep_merge`)
"""

from pathlib import Path
from typing import Any, Callable, Dict, Optional, Type, Union
import json

import yaml  # PyYAML

from .merge import deep_merge
from .errors import (
    ConfigError,
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)


PathLike = Union[str, Path]

_PARSERS: Dict[str, Callable[[str], Any]] = {
    ".yaml": yaml.safe_load,
    ".yml": yaml.safe_load,
    ".json": json.loads,
}


def load_mapping_file(
    path: PathLike,
    *,
    missing_error: Type[ConfigError] = DefaultsNotFoundError,
) -> Dict[str, Any]:
    """
    Lê um documento YAML/JSON cuja raiz deve ser um mapa.

    Args:
        path: Caminho do documento.
        missing_error: Subclasse de ConfigError usada quando o arquivo não existe
            (o loader de grafos usa `GraphFileNotFoundError`).

    Returns:
        Dict[str, Any]: Conteúdo do documento (`{}` para documento vazio).

    Raises:
        ConfigError: `missing_error`, se o arquivo não existir.
        UnsupportedConfigFormatError: Extensão fora de .yaml/.yml/.json.
        InvalidConfigRootTypeError: Raiz que não é um mapa.
    """
    path = Path(path)
    if not path.is_file():
        raise missing_error(f"Arquivo não encontrado: {path}")

    parser = _PARSERS.get(path.suffix.lower())
    if parser is None:
        raise UnsupportedConfigFormatError(
            f"Formato não suportado: {path.suffix or '(sem extensão)'} em {path.name}"
        )

    text = path.read_text(encoding="utf-8")
    document = parser(text) if text.strip() else None

    if document is None:
        return {}
    if not isinstance(document, dict):
        raise InvalidConfigRootTypeError(
            f"{path.name}: raiz deve ser um mapa, recebido {type(document).__name__}"
        )
    return document


def load_config(
    *,
    defaults_path: PathLike,
    local_path: Optional[PathLike] = None,
) -> Dict[str, Any]:
    """
    Resolve a configuração efetiva (defaults + local).

    Um `local_path` informado mas inexistente é ignorado: a ausência de
    overrides locais é o caso comum em CI e em máquinas novas.

    Raises:
        DefaultsNotFoundError: Se o documento de defaults não existir.
        UnsupportedConfigFormatError / InvalidConfigRootTypeError: Documento inválido.
        ConfigTypeConflictError: Override com tipo incompatível com o default.
    """
    defaults = load_mapping_file(defaults_path)
    if local_path is None or not Path(local_path).is_file():
        return defaults
    return deep_merge(defaults, load_mapping_file(local_path))
