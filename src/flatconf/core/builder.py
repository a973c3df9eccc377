# src/flatconf/core/builder.py
"""
Builder canônico de configuração do flatconf.

Este módulo define o `ConfigBuilder`, responsável por registrar fontes
(com prioridade e ordem de adição), executar o build em uma única
passagem síncrona e produzir um `Config` imutável.

Fluxo do build:
    1. Cada fonte registrada é carregada uma única vez (ordem de adição)
    2. O mapeamento é capturado como `RankedSource`
    3. As fontes são agregadas por precedência (`aggregate_sources`)
    4. Os placeholders são resolvidos (`resolve_placeholders`)
    5. O resultado é encapsulado em `Config`

Princípios fundamentais:
    - O build é tudo-ou-nada: qualquer erro interrompe a construção
    - A ordem de adição define a sequência usada no desempate
    - O builder não mantém estado global; cada `build()` é independente

Invariantes:
    - Prioridades são validadas no registro (inteiro >= 0)
    - Delimitadores são validados no registro
    - Apenas `SourceNotFoundError` pode ser ignorado, e só quando a fonte
      foi marcada com `ignore_not_found`

Limites explícitos:
    - Não observa fontes após o build (sem reload)
    - Não valida schema
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from flatconf.sources import (
    CallableSource,
    EnvSource,
    JsonFileSource,
    MapSource,
    PropertiesFileSource,
    Source,
    YamlFileSource,
)

from .accessor import Config
from .errors import ConfigError, SourceLoadError, SourceNotFoundError
from .merge import DEFAULT_PRIORITY, RankedSource, aggregate_sources, capture_source, validate_priority
from .placeholders import DEFAULT_DELIMITERS, DelimiterPair, resolve_placeholders


logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass(frozen=True)
class _Registration:
    source: Source
    priority: int
    ignore_not_found: bool


@dataclass
class _BuildLog:
    events: List[Dict[str, Any]] = field(default_factory=list)

    def log(self, event: str, **extra: Any) -> None:
        record = {
            "event": event,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        record.update(extra)
        self.events.append(record)


class ConfigBuilder:
    """
    Superfície fluente para montar a lista de fontes e construir a configuração.

    Exemplo:
        >>> config = (
        ...     ConfigBuilder()
        ...     .add_properties_file("app.properties")
        ...     .add_env(prefix="APP_", priority=10)
        ...     .build()
        ... )
        >>> config.get_int_or_default("server.port", 8080)

    Decisões arquiteturais:
        - Todos os métodos `add_*` retornam o próprio builder
        - A ordem de adição é preservada explicitamente
        - Erros de opção (prioridade, delimitadores) são levantados no registro
    """

    def __init__(self) -> None:
        self._registrations: List[_Registration] = []
        self._delimiters: DelimiterPair = DEFAULT_DELIMITERS
        self._strict = False

    # -----------------------------
    # Opções globais
    # -----------------------------
    def with_delimiters(self, open: str, close: str) -> "ConfigBuilder":
        self._delimiters = DelimiterPair(open, close)
        return self

    def strict_references(self, enabled: bool = True) -> "ConfigBuilder":
        """Referência a chave inexistente passa a ser erro de build."""
        self._strict = enabled
        return self

    # -----------------------------
    # Registro de fontes
    # -----------------------------
    def add_source(
        self,
        source: Source,
        *,
        priority: int = DEFAULT_PRIORITY,
        ignore_not_found: bool = False,
    ) -> "ConfigBuilder":
        if not isinstance(source, Source):
            raise TypeError(
                f"source deve implementar load() e name, recebido: {type(source).__name__}"
            )
        validate_priority(priority)
        self._registrations.append(_Registration(source, priority, ignore_not_found))
        return self

    def add_map(
        self,
        values: Mapping[str, Any],
        *,
        priority: int = DEFAULT_PRIORITY,
        name: str = "map",
    ) -> "ConfigBuilder":
        return self.add_source(MapSource(values, name=name), priority=priority)

    def add_provider(
        self,
        func: Callable[[], Mapping[str, Any]],
        *,
        priority: int = DEFAULT_PRIORITY,
        name: str = "",
    ) -> "ConfigBuilder":
        return self.add_source(CallableSource(func, name=name), priority=priority)

    def add_env(
        self,
        prefix: Optional[str] = None,
        *,
        priority: int = DEFAULT_PRIORITY,
        strip_prefix: bool = True,
        lowercase: bool = True,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "ConfigBuilder":
        source = EnvSource(prefix, strip_prefix=strip_prefix, lowercase=lowercase, environ=environ)
        return self.add_source(source, priority=priority)

    def add_properties_file(
        self,
        path: PathLike,
        *,
        priority: int = DEFAULT_PRIORITY,
        ignore_not_found: bool = False,
        encoding: str = "utf-8",
    ) -> "ConfigBuilder":
        return self.add_source(
            PropertiesFileSource(path, encoding=encoding),
            priority=priority,
            ignore_not_found=ignore_not_found,
        )

    def add_yaml_file(
        self,
        path: PathLike,
        *,
        priority: int = DEFAULT_PRIORITY,
        ignore_not_found: bool = False,
        encoding: str = "utf-8",
    ) -> "ConfigBuilder":
        return self.add_source(
            YamlFileSource(path, encoding=encoding),
            priority=priority,
            ignore_not_found=ignore_not_found,
        )

    def add_json_file(
        self,
        path: PathLike,
        *,
        priority: int = DEFAULT_PRIORITY,
        ignore_not_found: bool = False,
        encoding: str = "utf-8",
    ) -> "ConfigBuilder":
        return self.add_source(
            JsonFileSource(path, encoding=encoding),
            priority=priority,
            ignore_not_found=ignore_not_found,
        )

    # -----------------------------
    # Build
    # -----------------------------
    def _load(self, reg: _Registration, build_log: _BuildLog, sequence: int) -> Mapping[str, str]:
        name = reg.source.name
        try:
            values = reg.source.load()
        except SourceNotFoundError as e:
            if not reg.ignore_not_found:
                raise
            logger.debug("source %s not found, ignored: %s", name, e.reason)
            build_log.log(
                "source.ignored",
                source=name,
                priority=reg.priority,
                sequence=sequence,
                reason=e.reason,
            )
            return {}
        except ConfigError:
            raise
        except Exception as e:
            raise SourceLoadError(name, str(e) or type(e).__name__) from e

        if not isinstance(values, Mapping):
            raise SourceLoadError(
                name, f"load() deve retornar mapping, recebido: {type(values).__name__}"
            )

        logger.debug(
            "source %s loaded: %d entries (priority=%d, sequence=%d)",
            name, len(values), reg.priority, sequence,
        )
        build_log.log(
            "source.loaded",
            source=name,
            priority=reg.priority,
            sequence=sequence,
            entries=len(values),
        )
        return values

    def build(self) -> Config:
        """
        Executa o build completo e retorna a configuração resolvida.

        Raises:
            SourceLoadError: Se uma fonte falhar e não puder ser ignorada.
            MalformedPlaceholderError: Se algum valor tiver delimitadores desbalanceados.
            CyclicReferenceError: Se alguma chave depender de si mesma.
            UnresolvedReferenceError: Em modo estrito, para chave inexistente.
        """
        build_log = _BuildLog()

        ranked: List[RankedSource] = []
        for sequence, reg in enumerate(self._registrations):
            values = self._load(reg, build_log, sequence)
            ranked.append(
                capture_source(reg.source.name, values, priority=reg.priority, sequence=sequence)
            )

        flat = aggregate_sources(ranked)
        resolved = resolve_placeholders(flat, self._delimiters, strict=self._strict)

        build_log.log(
            "config.resolved",
            sources=len(ranked),
            keys=len(resolved),
            delimiters=(self._delimiters.open, self._delimiters.close),
            strict=self._strict,
        )
        config = Config(resolved, events=build_log.events)
        logger.debug("config built: %d keys, fingerprint %s", len(config), config.fingerprint[:12])
        return config
