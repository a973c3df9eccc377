# src/flatconf/core/placeholders.py
"""
Resolução canônica de placeholders.

Este módulo reescreve todos os valores de uma configuração plana,
substituindo cada placeholder `open + nome + close` pelo valor (já
resolvido) da chave que ele nomeia.

Gramática (v1):
    - Um placeholder é `open + nome + close` (padrão: `${nome}`)
    - O nome pode conter placeholders aninhados: `${${env}.server.host}`
    - Delimitadores são casados de forma balanceada; o placeholder mais
      interno é resolvido primeiro, pois o nome externo só é uma chave
      válida depois que seus placeholders internos foram substituídos
    - Um `close` sem `open` pendente é texto literal
    - Um `open` sem `close` correspondente é erro (placeholder malformado)

Algoritmo:
    - Cada chave é resolvida no máximo uma vez (memoização)
    - Um conjunto ordenado de chaves "em andamento" detecta ciclos por
      simples teste de pertinência
    - Após a substituição, o valor é reanalisado; placeholders completos
      formados pelo texto substituído também são resolvidos
    - Um `open` pendente que sobra após a substituição é placeholder
      malformado

Decisões arquiteturais:
    - Referência a chave inexistente resolve para string vazia; o modo
      estrito (`strict=True`) transforma esse caso em erro
    - A configuração de entrada nunca é mutada; a resolução opera sobre
      uma cópia própria

Invariantes:
    - O resultado não contém placeholder completo com os delimitadores
      configurados
    - Valores sem delimitadores são preservados sem alteração
    - Resolver novamente um resultado já resolvido não altera nada
    - A resolução é tudo-ou-nada

Limites explícitos:
    - Não interpreta nem converte valores
    - Não carrega fontes nem aplica precedência
    - Não reconhece os delimitadores padrão quando outros são configurados

Este módulo existe para garantir substituição previsível, terminante
e segura contra ciclos.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Tuple, Union

from .errors import (
    CyclicReferenceError,
    InvalidDelimitersError,
    MalformedPlaceholderError,
    UnresolvedReferenceError,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DelimiterPair:
    """
    Par de delimitadores que reconhece um placeholder: `open + nome + close`.

    A validação ocorre na construção, de modo que um par inválido nunca
    chega ao resolver.

    Raises:
        InvalidDelimitersError: Se algum delimitador for vazio, se forem
            iguais ou se um contiver o outro.
    """

    open: str = "${"
    close: str = "}"

    def __post_init__(self) -> None:
        if not isinstance(self.open, str) or not isinstance(self.close, str):
            raise InvalidDelimitersError(str(self.open), str(self.close), "delimiters must be strings")
        if not self.open or not self.close:
            raise InvalidDelimitersError(self.open, self.close, "delimiters must be non-empty")
        if self.open == self.close:
            raise InvalidDelimitersError(self.open, self.close, "delimiters must be distinct")
        if self.open in self.close or self.close in self.open:
            raise InvalidDelimitersError(self.open, self.close, "delimiters must not overlap")


DEFAULT_DELIMITERS = DelimiterPair()


@dataclass(frozen=True)
class _Token:
    parts: Tuple["_Node", ...]
    start: int


_Node = Union[str, _Token]


def _parse(text: str, delimiters: DelimiterPair, *, key: str, strict: bool) -> List[_Node]:
    """
    Converte um valor em uma sequência de literais e placeholders.

    Em modo estrito, um `open` sem `close` levanta `MalformedPlaceholderError`;
    fora dele, aberturas pendentes voltam a ser texto literal.
    """
    open_, close = delimiters.open, delimiters.close

    root: List[_Node] = []
    current: List[_Node] = root
    stack: List[Tuple[List[_Node], int]] = []
    literal: List[str] = []

    def flush() -> None:
        if literal:
            current.append("".join(literal))
            literal.clear()

    i = 0
    while i < len(text):
        if text.startswith(open_, i):
            flush()
            stack.append((current, i))
            current = []
            i += len(open_)
        elif stack and text.startswith(close, i):
            flush()
            parent, start = stack.pop()
            parent.append(_Token(tuple(current), start))
            current = parent
            i += len(close)
        else:
            literal.append(text[i])
            i += 1
    flush()

    if stack:
        if strict:
            raise MalformedPlaceholderError(key, text, stack[0][1])
        # aberturas pendentes, da mais interna para a mais externa
        while stack:
            parent, _ = stack.pop()
            parent.append(open_)
            parent.extend(current)
            current = parent

    return current


def _has_token(nodes: List[_Node]) -> bool:
    return any(isinstance(node, _Token) for node in nodes)


def contains_placeholder(text: str, delimiters: DelimiterPair = DEFAULT_DELIMITERS) -> bool:
    """Indica se `text` contém ao menos um placeholder completo."""
    if delimiters.open not in text:
        return False
    return _has_token(_parse(text, delimiters, key="", strict=False))


class _Resolver:
    def __init__(self, flat: Mapping[str, str], delimiters: DelimiterPair, strict: bool) -> None:
        self._raw: Dict[str, str] = dict(flat)
        self._delimiters = delimiters
        self._strict = strict
        self._resolved: Dict[str, str] = {}
        # dict como conjunto ordenado: preserva a cadeia para o erro de ciclo
        self._in_progress: Dict[str, None] = {}

    def resolve_all(self) -> Dict[str, str]:
        for key in self._raw:
            self.resolve_key(key)
        return {key: self._resolved[key] for key in self._raw}

    def resolve_key(self, key: str) -> str:
        if key in self._resolved:
            return self._resolved[key]
        if key in self._in_progress:
            raise CyclicReferenceError(key, list(self._in_progress))

        self._in_progress[key] = None
        try:
            value = self._expand(key, self._raw[key])
        finally:
            del self._in_progress[key]

        self._resolved[key] = value
        return value

    def _expand(self, key: str, text: str) -> str:
        if self._delimiters.open not in text:
            return text

        value = self._render(key, _parse(text, self._delimiters, key=key, strict=True))

        # O texto substituído pode formar novos placeholders completos.
        while self._delimiters.open in value:
            nodes = _parse(value, self._delimiters, key=key, strict=False)
            if not _has_token(nodes):
                break
            value = self._render(key, nodes)

        # `open` pendente formado pela substituição também é malformação
        if self._delimiters.open in value:
            _parse(value, self._delimiters, key=key, strict=True)
        return value

    def _render(self, key: str, nodes: Tuple[_Node, ...] | List[_Node]) -> str:
        out: List[str] = []
        for node in nodes:
            if isinstance(node, str):
                out.append(node)
                continue
            name = self._render(key, node.parts)
            out.append(self._lookup(key, name))
        return "".join(out)

    def _lookup(self, key: str, name: str) -> str:
        if name in self._raw:
            return self.resolve_key(name)
        if self._strict:
            raise UnresolvedReferenceError(key, name)
        return ""


def resolve_placeholders(
    flat: Mapping[str, str],
    delimiters: Optional[DelimiterPair] = None,
    *,
    strict: bool = False,
) -> Dict[str, str]:
    """
    Resolve recursivamente todos os placeholders de uma configuração plana.

    Para cada chave, o valor bruto é analisado; cada placeholder tem seu
    nome resolvido primeiro (nomes aninhados) e então é substituído pelo
    valor resolvido da chave correspondente. A resolução de uma chave que
    já está em andamento caracteriza ciclo.

    Decisões arquiteturais:
        - Memoização por chave: cada chave é resolvida uma única vez
        - Detecção de ciclo por pertinência no conjunto "em andamento"
        - Chave referenciada inexistente vira string vazia, exceto em
          modo estrito

    Invariantes:
        - O input não é mutado
        - Nenhum resultado parcial é retornado em caso de erro

    Args:
        flat (Mapping[str, str]): Configuração plana (pós-merge).
        delimiters (Optional[DelimiterPair]): Par de delimitadores; `${`/`}`
            quando omitido.
        strict (bool): Se True, referência a chave inexistente é erro.

    Returns:
        Dict[str, str]: Nova configuração com todos os valores resolvidos.

    Raises:
        MalformedPlaceholderError: Se algum valor tiver `open` sem `close`.
        CyclicReferenceError: Se alguma chave depender de si mesma.
        UnresolvedReferenceError: Em modo estrito, para chave inexistente.
    """
    resolver = _Resolver(flat, delimiters or DEFAULT_DELIMITERS, strict)
    resolved = resolver.resolve_all()
    logger.debug("resolved %d keys (strict=%s)", len(resolved), strict)
    return resolved
