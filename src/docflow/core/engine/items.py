# src/docflow/core/engine/items.py
"""
Tipos canônicos de entrada e saída de nodes.

Este módulo define as estruturas trocadas entre o Engine, os processadores
externos e o OutputDeriver:

    - InputItem      → união explícita de três variantes:
                         NamedFile   (arquivo com nome intrínseco)
                         NamedOutput (saída já nomeada de um node anterior)
                         RawPayload  (payload binário sem nome)
    - ProcessResult  → resultado cru reportado por um processador
    - PayloadShape   → variante explícita do campo `result`:
                         NoPayload | SinglePayload | MultiplePayloads

Decisões arquiteturais:
    - Objetos soltos (bytes, Path, file handles) são resolvidos para um
      InputItem **uma única vez**, na fronteira onde entradas são reunidas
      (`as_input_item`); o OutputDeriver nunca inspeciona formas em runtime
    - `None` e sequência vazia são ambos "sem payload"; um objeto binário
      (mesmo vazio) é sempre um payload único
    - Payloads são normalizados para `bytes` (imutável), de modo que nenhum
      node consiga mutar a saída de outro

Invariantes:
    - NamedOutput sempre possui `filename` não vazio
    - Instâncias são imutáveis (frozen)

Limites explícitos:
    - Não decide nomes de arquivos (ver `outputs`)
    - Não executa processadores
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from docflow.core.config.settings import DEFAULT_ACCEPTED_EXTENSIONS
from docflow.core.exceptions import UnsupportedInputError


_BINARY = (bytes, bytearray, memoryview)


def _to_bytes(value: Any) -> bytes:
    if isinstance(value, bytes):
        return value
    if isinstance(value, _BINARY):
        return bytes(value)
    raise TypeError(f"payload must be binary, received: {type(value).__name__}")


# ---------------------------------------------------------------------------
# Saídas nomeadas
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class NamedOutput:
    """Artefato binário associado a um nome de arquivo escolhido."""

    payload: bytes
    filename: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "payload", _to_bytes(self.payload))
        if not isinstance(self.filename, str) or not self.filename:
            raise ValueError("NamedOutput.filename must be a non-empty string")


# ---------------------------------------------------------------------------
# InputItem (união explícita)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class NamedFile:
    """Arquivo de entrada com nome intrínseco (ex.: upload do usuário)."""

    payload: bytes
    name: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "payload", _to_bytes(self.payload))


@dataclass(frozen=True)
class RawPayload:
    """Payload binário sem nome intrínseco."""

    payload: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "payload", _to_bytes(self.payload))


InputItem = Union[NamedFile, NamedOutput, RawPayload]


def as_input_item(obj: Any) -> InputItem:
    """
    Resolve um objeto de entrada solto para uma variante de InputItem.

    Regras:
        - NamedFile / NamedOutput / RawPayload → inalterado
        - pathlib.Path → NamedFile com o conteúdo e o nome do arquivo
        - bytes / bytearray / memoryview → RawPayload
        - file handle binário com `name` → NamedFile (nome sem diretório)

    Raises:
        TypeError: Se o objeto não puder ser interpretado como entrada.
    """
    if isinstance(obj, (NamedFile, NamedOutput, RawPayload)):
        return obj
    if isinstance(obj, Path):
        return NamedFile(payload=obj.read_bytes(), name=obj.name)
    if isinstance(obj, _BINARY):
        return RawPayload(payload=obj)
    if hasattr(obj, "read") and isinstance(getattr(obj, "name", None), str):
        return NamedFile(payload=obj.read(), name=Path(obj.name).name)
    raise TypeError(f"Unsupported input item: {type(obj).__name__}")


def load_input_files(
    paths: Iterable[Union[str, Path]],
    *,
    accept: Sequence[str] = DEFAULT_ACCEPTED_EXTENSIONS,
) -> List[NamedFile]:
    """Lê arquivos do disco como NamedFile, na ordem recebida."""
    accepted = {a.lower() for a in accept}
    items: List[NamedFile] = []
    for raw in paths:
        path = Path(raw)
        if path.suffix.lower() not in accepted:
            raise UnsupportedInputError(
                message=f"Unsupported input file type: {path.name}",
                details={"path": str(path), "accepted": sorted(accepted)},
                hint="Converta o arquivo para um formato aceito ou ajuste inputs.accept.",
            )
        items.append(NamedFile(payload=path.read_bytes(), name=path.name))
    return items


# ---------------------------------------------------------------------------
# ProcessResult + PayloadShape
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class NoPayload:
    """O processador não produziu payload (passthrough)."""


@dataclass(frozen=True)
class SinglePayload:
    payload: bytes


@dataclass(frozen=True)
class MultiplePayloads:
    payloads: Tuple[bytes, ...]


PayloadShape = Union[NoPayload, SinglePayload, MultiplePayloads]


def classify_payload(result: Any) -> PayloadShape:
    if result is None:
        return NoPayload()
    if isinstance(result, _BINARY):
        return SinglePayload(payload=_to_bytes(result))
    if isinstance(result, (list, tuple)):
        if not result:
            return NoPayload()
        return MultiplePayloads(payloads=tuple(_to_bytes(r) for r in result))
    raise TypeError(f"Unsupported result payload: {type(result).__name__}")


@dataclass(frozen=True)
class ProcessResult:
    """
    Resultado cru reportado por um processador para um node.

    Campos:
        - success: indica se o processador concluiu com sucesso
        - result: None, um payload binário ou uma sequência de payloads
        - filename: nome sugerido (único, lista separada por vírgula ou template)
        - metadata: metadados livres; `outputFiles` lista nomes explícitos
    """

    success: bool = True
    result: Any = None
    filename: Optional[str] = None
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # valida a forma do payload já na construção
        classify_payload(self.result)
        if self.metadata is None:
            object.__setattr__(self, "metadata", {})

    @property
    def shape(self) -> PayloadShape:
        return classify_payload(self.result)

    @classmethod
    def coerce(cls, raw: Any) -> "ProcessResult":
        """Aceita um ProcessResult ou um mapa com as mesmas chaves."""
        if isinstance(raw, ProcessResult):
            return raw
        if isinstance(raw, Mapping):
            return cls(
                success=bool(raw.get("success", True)),
                result=raw.get("result"),
                filename=raw.get("filename"),
                metadata=dict(raw.get("metadata") or {}),
            )
        raise TypeError(f"Processor must return ProcessResult, received: {type(raw).__name__}")
