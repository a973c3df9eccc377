# src/flatconf/core/accessor.py
"""
Acesso tipado à configuração resolvida.

Este módulo define `Config`, o objeto produzido pelo build: um mapeamento
imutável chave -> valor (ResolvedConfig) com leitura tipada para bool,
int, float, str e lista de strings.

Modos de leitura (uniformes para todos os tipos):
    - get_T(key)                 → valor zero do tipo em ausência/falha
    - get_T_or_default(key, d)   → `d` em ausência/falha
    - get_T_or_fail(key)         → levanta KeyNotFoundError / ValueParseError

Princípios fundamentais:
    - Uma única primitiva de parse (`_parse`) alimenta os três modos
    - Nenhuma coerção implícita além do parse do tipo solicitado
    - Leituras nunca alteram estado

Invariantes:
    - A configuração resolvida é somente leitura durante toda a vida do objeto
    - Erros de leitura são locais à chamada e não invalidam o objeto
    - Leituras concorrentes são seguras (não há mutação)

Limites explícitos:
    - Não carrega fontes nem resolve placeholders
    - Não valida schema
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, TypeVar

from .errors import KeyNotFoundError, ValueParseError
from .hashing import compute_config_hash


T = TypeVar("T")

_INT_RE = re.compile(r"[+-]?[0-9]+")
_TRUE = frozenset({"true", "1"})
_FALSE = frozenset({"false", "0"})


class _Unparseable(Exception):
    pass


def parse_bool(raw: str) -> bool:
    lowered = raw.lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise _Unparseable(raw)


def parse_int(raw: str) -> int:
    if not _INT_RE.fullmatch(raw):
        raise _Unparseable(raw)
    return int(raw, 10)


def parse_float(raw: str) -> float:
    # float() aceita "1_000.5" e espaços; literais base-10 não
    if "_" in raw or raw != raw.strip() or not raw:
        raise _Unparseable(raw)
    try:
        return float(raw)
    except ValueError as e:
        raise _Unparseable(raw) from e


def parse_string(raw: str) -> str:
    return raw


def string_slice_parser(separator: str) -> Callable[[str], List[str]]:
    def parse(raw: str) -> List[str]:
        if not separator:
            raise _Unparseable(raw)
        if raw == "":
            return []
        return raw.split(separator)

    return parse


class Config:
    """
    Configuração resolvida e imutável com leitura tipada.

    Instâncias são criadas por `ConfigBuilder.build()`; construir
    diretamente a partir de um mapeamento já resolvido também é válido
    (os valores são copiados).

    Atributos:
    - fingerprint: SHA-256 do JSON canônico da configuração resolvida
    - events: eventos estruturados registrados durante o build
    """

    __slots__ = ("_values", "_fingerprint", "_events")

    def __init__(
        self,
        values: Mapping[str, str],
        *,
        events: Sequence[Mapping[str, Any]] = (),
    ) -> None:
        resolved: Dict[str, str] = dict(values)
        self._values: Mapping[str, str] = MappingProxyType(resolved)
        self._fingerprint = compute_config_hash(resolved)
        self._events: Tuple[Mapping[str, Any], ...] = tuple(
            MappingProxyType(dict(event)) for event in events
        )

    # -----------------------------
    # Leitura estrutural
    # -----------------------------
    @property
    def fingerprint(self) -> str:
        return self._fingerprint

    @property
    def events(self) -> Tuple[Mapping[str, Any], ...]:
        return self._events

    def exists(self, key: str) -> bool:
        return key in self._values

    def keys(self) -> List[str]:
        return sorted(self._values)

    def as_dict(self) -> Dict[str, str]:
        return dict(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Config(keys={len(self._values)}, fingerprint={self._fingerprint[:12]})"

    # -----------------------------
    # Primitiva de parse
    # -----------------------------
    def _parse(self, key: str, parser: Callable[[str], T], target_type: str, zero: T) -> T:
        """Parse-or-report: única rotina falível usada por todos os modos."""
        if key not in self._values:
            raise KeyNotFoundError(key, zero_value=zero)
        raw = self._values[key]
        try:
            return parser(raw)
        except _Unparseable:
            raise ValueParseError(key, raw, target_type, zero_value=zero) from None

    def _or_default(self, key: str, parser: Callable[[str], T], target_type: str, default: T) -> T:
        try:
            return self._parse(key, parser, target_type, default)
        except (KeyNotFoundError, ValueParseError):
            return default

    # -----------------------------
    # bool
    # -----------------------------
    def get_bool(self, key: str) -> bool:
        return self._or_default(key, parse_bool, "bool", False)

    def get_bool_or_default(self, key: str, default: bool) -> bool:
        return self._or_default(key, parse_bool, "bool", default)

    def get_bool_or_fail(self, key: str) -> bool:
        return self._parse(key, parse_bool, "bool", False)

    # -----------------------------
    # int
    # -----------------------------
    def get_int(self, key: str) -> int:
        return self._or_default(key, parse_int, "int", 0)

    def get_int_or_default(self, key: str, default: int) -> int:
        return self._or_default(key, parse_int, "int", default)

    def get_int_or_fail(self, key: str) -> int:
        return self._parse(key, parse_int, "int", 0)

    # -----------------------------
    # float
    # -----------------------------
    def get_float(self, key: str) -> float:
        return self._or_default(key, parse_float, "float", 0.0)

    def get_float_or_default(self, key: str, default: float) -> float:
        return self._or_default(key, parse_float, "float", default)

    def get_float_or_fail(self, key: str) -> float:
        return self._parse(key, parse_float, "float", 0.0)

    # -----------------------------
    # str
    # -----------------------------
    def get_string(self, key: str) -> str:
        return self._or_default(key, parse_string, "string", "")

    def get_string_or_default(self, key: str, default: str) -> str:
        return self._or_default(key, parse_string, "string", default)

    def get_string_or_fail(self, key: str) -> str:
        return self._parse(key, parse_string, "string", "")

    # -----------------------------
    # lista de strings
    # -----------------------------
    def get_string_slice(self, key: str, separator: str) -> List[str]:
        return self._or_default(key, string_slice_parser(separator), "string slice", [])

    def get_string_slice_or_default(
        self, key: str, separator: str, default: Optional[List[str]] = None
    ) -> List[str]:
        fallback = [] if default is None else default
        return self._or_default(key, string_slice_parser(separator), "string slice", fallback)

    def get_string_slice_or_fail(self, key: str, separator: str) -> List[str]:
        return self._parse(key, string_slice_parser(separator), "string slice", [])
