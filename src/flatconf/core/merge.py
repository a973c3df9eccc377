# src/flatconf/core/merge.py
"""
Agregação canônica de fontes por prioridade.

Este módulo implementa a política oficial de merge utilizada pelo flatconf
para combinar os mapeamentos produzidos por N fontes em uma única
configuração plana (FlatConfig).

Política de merge (v1):
    - Cada fonte é capturada como `RankedSource` (prioridade + sequência)
    - Prioridade menor vence (0 é a maior precedência permitida)
    - Em empate de prioridade, a fonte adicionada por último vence
    - A chave é a unidade de override (não há merge de valores)

Princípios fundamentais:
    - O merge é determinístico e puramente funcional
    - Nenhum input é mutado durante o processo
    - Não existem heurísticas implícitas nem coerção de tipos

Invariantes:
    - A mesma entrada sempre produz a mesma saída
    - O resultado contém exatamente uma entrada por chave distinta
    - Chaves e valores chegam ao merge já aparados (trim)

Limites explícitos:
    - Não carrega fontes (isso é responsabilidade do builder)
    - Não resolve placeholders
    - Não interpreta valores

Este módulo existe para garantir previsibilidade e rastreabilidade
na precedência entre fontes de configuração.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping

from .errors import InvalidPriorityError, UnsupportedValueError


# Constantes de processo: consumidas no build, nunca mutadas.
DEFAULT_PRIORITY = 100
HIGHEST_PRIORITY = 0


@dataclass(frozen=True)
class RankedSource:
    """
    Saída de uma fonte etiquetada com prioridade e sequência.

    Campos:
    - name: identificador legível da fonte (para eventos e erros)
    - values: mapeamento chave -> valor, somente leitura
    - priority: precedência (menor vence)
    - sequence: posição na ordem de adição, usada apenas para desempate
    """

    name: str
    values: Mapping[str, str]
    priority: int = DEFAULT_PRIORITY
    sequence: int = 0


def validate_priority(priority: int) -> int:
    # bool é subclasse de int, mas True/False não são prioridades
    if isinstance(priority, bool) or not isinstance(priority, int):
        raise InvalidPriorityError(priority)
    if priority < HIGHEST_PRIORITY:
        raise InvalidPriorityError(priority)
    return priority


def stringify_scalar(source: str, key: str, value: Any) -> str:
    """
    Converte um valor escalar para a representação textual canônica.

    - str é preservada
    - bool vira "true"/"false" (antes de int, pois bool é subclasse de int)
    - int/float usam `str()`
    - date/datetime usam ISO 8601 (`isoformat()`)
    - None vira ""
    - listas, mapas e demais tipos são rejeitados
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    if value is None:
        return ""
    raise UnsupportedValueError(
        source,
        f"valor não escalar para a chave '{key}': {type(value).__name__}",
    )


def capture_source(
    name: str,
    values: Mapping[str, str],
    *,
    priority: int = DEFAULT_PRIORITY,
    sequence: int = 0,
) -> RankedSource:
    """
    Captura o mapeamento de uma fonte como `RankedSource` imutável.

    Chaves e valores são aparados; entradas cuja chave fica vazia após o
    trim são descartadas. Valores não textuais passam por `stringify_scalar`,
    a mesma conversão aplicada pelas fontes embutidas. O mapeamento
    capturado é uma cópia, de modo que alterações posteriores no dicionário
    da fonte não afetam o build.

    Raises:
        InvalidPriorityError: Se a prioridade não for inteiro >= 0.
        UnsupportedValueError: Se algum valor não for escalar.
    """
    validate_priority(priority)

    captured: Dict[str, str] = {}
    for raw_key, raw_value in values.items():
        key = str(raw_key).strip()
        if not key:
            continue
        captured[key] = stringify_scalar(name, key, raw_value).strip()

    return RankedSource(
        name=name,
        values=MappingProxyType(captured),
        priority=priority,
        sequence=sequence,
    )


def precedence_order(ranked: Iterable[RankedSource]) -> List[RankedSource]:
    """Ordena da menor para a maior precedência (ordem de escrita)."""
    return sorted(ranked, key=lambda r: (-r.priority, r.sequence))


def aggregate_sources(ranked: Iterable[RankedSource]) -> Dict[str, str]:
    """
    Combina fontes ranqueadas em uma configuração plana.

    As fontes são percorridas da menor para a maior precedência, e cada
    uma escreve suas entradas no mapa acumulado. Assim, uma fonte de maior
    precedência sempre sobrescreve as de menor precedência para a mesma
    chave e, entre fontes de mesma prioridade, a adicionada por último
    sobrescreve a anterior.

    Decisões arquiteturais:
        - Ordenação por `(-priority, sequence)`; o sort é estável
        - O merge é puramente funcional (inputs não são mutados)
        - Lista vazia produz configuração vazia

    Args:
        ranked (Iterable[RankedSource]): Fontes capturadas pelo builder.

    Returns:
        Dict[str, str]: Nova configuração plana (FlatConfig).
    """
    result: Dict[str, str] = {}
    for source in precedence_order(ranked):
        result.update(source.values)
    return result
