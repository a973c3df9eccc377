# src/flatconf/__init__.py
"""
flatconf — configuração plana, multi-fonte e determinística.

Este pacote raiz define o namespace público do flatconf, uma biblioteca
para agregar pares chave/valor de múltiplas fontes (arquivos, variáveis de
ambiente, valores programáticos e provedores customizados), resolver
placeholders recursivos dentro dos valores e expor leitura tipada.

Princípios centrais:
    - Precedência explícita: prioridade menor vence; empate, vence a última fonte
    - Resolução de placeholders terminante e segura contra ciclos
    - Nenhuma coerção de tipo surpresa e nenhuma detecção implícita de formato
    - Build tudo-ou-nada; o resultado é imutável

Arquitetura em alto nível:
    - sources          → fontes (map, env, properties, YAML, JSON, provedores)
    - core.merge       → agregação por prioridade
    - core.placeholders→ resolução recursiva de placeholders
    - core.accessor    → `Config`, leitura tipada da configuração resolvida
    - core.builder     → `ConfigBuilder`, superfície fluente de montagem

Limites explícitos:
    - Não suporta valores estruturados (listas/objetos aninhados)
    - Não observa fontes após o build (sem reload)
    - Não valida schema além do parse de tipos na leitura
"""

import logging

from .core.accessor import Config
from .core.builder import ConfigBuilder
from .core.errors import (
    ConfigError,
    CyclicReferenceError,
    InvalidDelimitersError,
    InvalidPriorityError,
    KeyNotFoundError,
    MalformedPlaceholderError,
    SourceLoadError,
    SourceNotFoundError,
    UnresolvedReferenceError,
    UnsupportedValueError,
    ValueParseError,
)
from .core.hashing import compute_config_hash
from .core.merge import DEFAULT_PRIORITY, HIGHEST_PRIORITY, RankedSource, aggregate_sources
from .core.placeholders import DelimiterPair, contains_placeholder, resolve_placeholders
from .sources import (
    CallableSource,
    EnvSource,
    JsonFileSource,
    MapSource,
    PropertiesFileSource,
    Source,
    YamlFileSource,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Config",
    "ConfigBuilder",
    "ConfigError",
    "CyclicReferenceError",
    "InvalidDelimitersError",
    "InvalidPriorityError",
    "KeyNotFoundError",
    "MalformedPlaceholderError",
    "SourceLoadError",
    "SourceNotFoundError",
    "UnresolvedReferenceError",
    "UnsupportedValueError",
    "ValueParseError",
    "compute_config_hash",
    "DEFAULT_PRIORITY",
    "HIGHEST_PRIORITY",
    "RankedSource",
    "aggregate_sources",
    "DelimiterPair",
    "contains_placeholder",
    "resolve_placeholders",
    "CallableSource",
    "EnvSource",
    "JsonFileSource",
    "MapSource",
    "PropertiesFileSource",
    "Source",
    "YamlFileSource",
]
