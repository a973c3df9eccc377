# src/flatconf/core/errors.py
"""
Exceções canônicas do flatconf.

Este módulo define a hierarquia oficial de exceções utilizadas durante
o carregamento de fontes, a resolução de placeholders e a leitura tipada
da configuração resolvida.

Existem duas famílias de erro, com políticas de propagação distintas:

    - Erros de build (fatais): carregamento de fonte, prioridade inválida,
      delimitadores inválidos, placeholder malformado, referência cíclica
      e referência não resolvida (modo estrito). Interrompem a construção
      e nenhum objeto parcial é produzido.
    - Erros de leitura (locais): chave ausente e falha de parse. Existem
      apenas nos acessores `*_or_fail` e nunca invalidam a configuração.

Princípios fundamentais:
    - Exceções são tipadas e semânticas
    - Toda exceção carrega dados estruturados em `details`
    - Mensagens são curtas e direcionadas ao usuário

Invariantes:
    - Todas as exceções herdam de `ConfigError`
    - `details` é sempre serializável em JSON

Limites explícitos:
    - Não realiza fallback ou recovery
    - Não registra eventos nem logs

Este módulo existe para garantir clareza,
consistência e previsibilidade no tratamento de erros de configuração.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence


class ConfigError(Exception):
    """
    Exceção base para todos os erros do flatconf.

    Cada subclasse preenche `details` com os dados estruturados relevantes
    para diagnóstico; `to_dict()` produz um payload estável com `type`,
    `message` e `details`.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = dict(details or {})

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return {
            "type": type(self).__name__,
            "message": self.message,
            "details": dict(self.details),
        }


# ---------------------------------------------------------------------------
# Build: fontes
# ---------------------------------------------------------------------------

class SourceLoadError(ConfigError):
    """
    Exceção levantada quando uma fonte não consegue produzir seu mapeamento.

    Decisões arquiteturais:
        - A falha é fatal para o build, exceto quando a fonte foi marcada
          com `ignore_not_found` e a causa é `SourceNotFoundError`
        - A exceção original do parser é encadeada via `raise ... from`

    Limites explícitos:
        - Não tenta ler a fonte novamente
        - Não produz mapeamento parcial
    """

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(
            f"Falha ao carregar a fonte '{source}': {reason}",
            {"source": source, "reason": reason},
        )
        self.source = source
        self.reason = reason


class SourceNotFoundError(SourceLoadError):
    """A origem da fonte (ex.: arquivo) não existe."""


class UnsupportedValueError(SourceLoadError):
    """A fonte contém um valor estruturado (lista, mapa no root inválido)."""


# ---------------------------------------------------------------------------
# Build: opções do builder
# ---------------------------------------------------------------------------

class InvalidPriorityError(ConfigError, ValueError):
    """Prioridade negativa ou não inteira atribuída a uma fonte."""

    def __init__(self, priority: Any) -> None:
        super().__init__(
            f"Prioridade inválida: {priority!r} (esperado inteiro >= 0)",
            {"priority": repr(priority)},
        )
        self.priority = priority


class InvalidDelimitersError(ConfigError, ValueError):
    """
    Exceção levantada quando o par de delimitadores não é utilizável.

    Regras:
        - open e close são strings não vazias
        - open e close são distintos
        - nenhum dos dois contém o outro
    """

    def __init__(self, open: str, close: str, reason: str) -> None:
        super().__init__(
            f"Delimitadores inválidos ({open!r}, {close!r}): {reason}",
            {"open": open, "close": close, "reason": reason},
        )
        self.open = open
        self.close = close


# ---------------------------------------------------------------------------
# Build: resolução de placeholders
# ---------------------------------------------------------------------------

class MalformedPlaceholderError(ConfigError):
    """
    Exceção levantada quando um valor contém um delimitador de abertura
    sem o delimitador de fechamento correspondente.

    Exemplo:
        - url=http://${server.host:8080

    Invariantes:
        - Nenhuma configuração parcial é produzida
    """

    def __init__(self, key: str, value: str, position: int) -> None:
        super().__init__(
            f"Placeholder malformado na chave '{key}' (posição {position}): {value!r}",
            {"key": key, "value": value, "position": position},
        )
        self.key = key
        self.value = value
        self.position = position


class CyclicReferenceError(ConfigError):
    """
    Exceção levantada quando uma chave referencia a si mesma,
    direta (`a=${a}`) ou transitivamente (`a=${b}`, `b=${a}`).

    `key` identifica a chave cuja resolução foi solicitada enquanto ainda
    estava em andamento; `chain` lista o caminho de resolução até o ciclo.
    """

    def __init__(self, key: str, chain: Sequence[str]) -> None:
        path: List[str] = list(chain) + [key]
        super().__init__(
            f"Referência cíclica na chave '{key}': {' -> '.join(path)}",
            {"key": key, "chain": path},
        )
        self.key = key
        self.chain = path


class UnresolvedReferenceError(ConfigError):
    """Placeholder aponta para uma chave ausente (somente em modo estrito)."""

    def __init__(self, key: str, reference: str) -> None:
        super().__init__(
            f"A chave '{key}' referencia a chave inexistente '{reference}'",
            {"key": key, "reference": reference},
        )
        self.key = key
        self.reference = reference


# ---------------------------------------------------------------------------
# Leitura tipada
# ---------------------------------------------------------------------------

class KeyNotFoundError(ConfigError, KeyError):
    """Chave ausente na configuração resolvida (acessores `*_or_fail`)."""

    def __init__(self, key: str, zero_value: Any = None) -> None:
        super().__init__(f"Chave não encontrada: '{key}'", {"key": key})
        self.key = key
        self.zero_value = zero_value

    def __str__(self) -> str:
        # KeyError.__str__ aplica repr() na mensagem
        return self.message


class ValueParseError(ConfigError, ValueError):
    """
    Exceção levantada quando o valor armazenado não pode ser convertido
    para o tipo solicitado (acessores `*_or_fail`).
    """

    def __init__(self, key: str, raw_value: str, target_type: str, zero_value: Any = None) -> None:
        super().__init__(
            f"Valor da chave '{key}' não é um {target_type} válido: {raw_value!r}",
            {"key": key, "raw_value": raw_value, "target_type": target_type},
        )
        self.key = key
        self.raw_value = raw_value
        self.target_type = target_type
        self.zero_value = zero_value
