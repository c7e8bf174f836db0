# src/docflow/core/engine/outputs.py
"""
OutputDeriver — normalização de resultados de processadores em saídas nomeadas.

Processadores são heterogêneos e podem reportar nomes de arquivos por três
canais diferentes. Esta função pura decide, de forma determinística e sem
perda, o nome de cada artefato produzido por um node.

Política (ordem de prioridade):

    1. Sem payload → passthrough: uma saída por item de entrada, mesma ordem
         - NamedFile   → nome intrínseco
         - NamedOutput → inalterado
         - RawPayload na posição i → `passthrough_{i+1}.pdf`
    2. Múltiplos payloads (N):
         a. `metadata.outputFiles` com exatamente N nomes não vazios → usados
         b. `filename` separado por vírgulas resultando em exatamente N nomes → usados
         c. `filename` presente → `_{i+1}` inserido antes da extensão
         d. label sanitizado + `_output.pdf`, indexado como em (c)
    3. Payload único → `filename` sem espaços nas bordas, ou label sanitizado + `_output.pdf`

Invariantes:
    - A função é total: nunca levanta exceção para um ProcessResult válido
    - O número de saídas é igual ao número de payloads (ou de entradas no passthrough)
    - Nenhum input é mutado

Limites explícitos:
    - Não valida o conteúdo dos payloads
    - Não garante unicidade de nomes entre nodes diferentes
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, List, Mapping, Sequence

from .items import (
    InputItem,
    MultiplePayloads,
    NamedFile,
    NamedOutput,
    NoPayload,
    ProcessResult,
    RawPayload,
    SinglePayload,
)


_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class NamingPolicy:
    """Constantes de nomeação (os defaults reproduzem o comportamento canônico)."""

    default_extension: str = "pdf"
    fallback_label: str = "workflow_node"
    passthrough_prefix: str = "passthrough"

    @classmethod
    def from_settings(cls, settings: Any) -> "NamingPolicy":
        return cls(
            default_extension=settings.default_extension,
            fallback_label=settings.fallback_label,
            passthrough_prefix=settings.passthrough_prefix,
        )


DEFAULT_NAMING_POLICY = NamingPolicy()


def sanitize_label(label: str, fallback: str = DEFAULT_NAMING_POLICY.fallback_label) -> str:
    normalized = _WHITESPACE.sub("_", (label or "").strip())
    return normalized or fallback


def split_filename_list(value: str) -> List[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


def with_indexed_suffix(filename: str, index: int) -> str:
    """Insere `_{index+1}` antes da extensão (ou ao final, se não houver extensão)."""
    dot = filename.rfind(".")
    if 0 < dot < len(filename) - 1:
        return f"{filename[:dot]}_{index + 1}{filename[dot:]}"
    return f"{filename}_{index + 1}"


def metadata_filenames(metadata: Mapping[str, Any]) -> List[str]:
    if not isinstance(metadata, Mapping):
        return []
    output_files = metadata.get("outputFiles", metadata.get("output_files"))
    if not isinstance(output_files, (list, tuple)):
        return []
    names = [item.strip() for item in output_files if isinstance(item, str)]
    return [name for name in names if name]


def _fallback_name(node_label: str, policy: NamingPolicy) -> str:
    return f"{sanitize_label(node_label, policy.fallback_label)}_output.{policy.default_extension}"


def _passthrough(item: InputItem, index: int, policy: NamingPolicy) -> NamedOutput:
    if isinstance(item, NamedOutput):
        return item
    if isinstance(item, NamedFile):
        return NamedOutput(payload=item.payload, filename=item.name)
    if isinstance(item, RawPayload):
        return NamedOutput(
            payload=item.payload,
            filename=f"{policy.passthrough_prefix}_{index + 1}.{policy.default_extension}",
        )
    raise TypeError(f"Unsupported input item: {type(item).__name__}")


def _multiple_filenames(
    count: int, filename: Any, metadata: Mapping[str, Any], node_label: str, policy: NamingPolicy
) -> List[str]:
    names = metadata_filenames(metadata)
    if len(names) == count:
        return names

    # nomes são aparados; um filename só de espaços equivale a ausente
    template = filename.strip() if isinstance(filename, str) else ""
    if template:
        split_names = split_filename_list(template)
        if len(split_names) == count:
            return split_names
        return [with_indexed_suffix(template, i) for i in range(count)]

    fallback = _fallback_name(node_label, policy)
    return [with_indexed_suffix(fallback, i) for i in range(count)]


def derive_outputs(
    result: ProcessResult,
    node_label: str,
    input_items: Sequence[InputItem] = (),
    policy: NamingPolicy = DEFAULT_NAMING_POLICY,
) -> List[NamedOutput]:
    """
    Converte o resultado de um processador em saídas nomeadas.

    Args:
        result (ProcessResult): Resultado reportado pelo processador.
        node_label (str): Label do node (usado no nome de fallback).
        input_items (Sequence[InputItem]): Entradas recebidas pelo node, na ordem.
        policy (NamingPolicy): Constantes de nomeação.

    Returns:
        List[NamedOutput]: Saídas nomeadas, na ordem dos payloads (ou das entradas).
    """
    shape = result.shape

    if isinstance(shape, NoPayload):
        return [_passthrough(item, i, policy) for i, item in enumerate(input_items)]

    if isinstance(shape, MultiplePayloads):
        filenames = _multiple_filenames(
            len(shape.payloads), result.filename, result.metadata, node_label, policy
        )
        return [
            NamedOutput(payload=payload, filename=name)
            for payload, name in zip(shape.payloads, filenames)
        ]

    if isinstance(shape, SinglePayload):
        explicit = result.filename.strip() if isinstance(result.filename, str) else ""
        return [NamedOutput(payload=shape.payload, filename=explicit or _fallback_name(node_label, policy))]

    raise TypeError(f"Unsupported payload shape: {type(shape).__name__}")
