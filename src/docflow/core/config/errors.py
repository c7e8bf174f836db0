# src/docflow/core/config/errors.py
"""
Erros da camada de configuração do docflow.

Cobrem apenas problemas estruturais de documentos (config e grafo):
arquivo ausente, formato desconhecido, raiz inválida ou conflito de tipo
no merge. Falhas de processador nunca passam por aqui; ver
`docflow.core.exceptions`.
"""


class ConfigError(Exception):
    """Raiz comum de todos os erros de documento de configuração."""


class DefaultsNotFoundError(ConfigError):
    """
    O documento de defaults não existe no caminho informado.

    Nada é gerado automaticamente: sem defaults, não há run.
    """


class UnsupportedConfigFormatError(ConfigError):
    """Extensão de documento diferente de .yaml, .yml ou .json."""


class InvalidConfigRootTypeError(ConfigError):
    """A raiz do documento é uma lista, escalar ou outro tipo que não `dict`."""


class ConfigTypeConflictError(ConfigError):
    """
    Override com tipo incompatível com o valor default.

    Exemplo:
        defaults: {"outputs": {"default_extension": "pdf"}}
        local:    {"outputs": "pdf"}

    O merge é abortado por inteiro; nenhum resultado parcial é devolvido.
    """
