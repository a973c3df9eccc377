# src/flatconf/sources/env.py
"""Fonte baseada em variáveis de ambiente."""

from __future__ import annotations

import os
from typing import Dict, Mapping, Optional


class EnvSource:
    """
    Snapshot de variáveis de ambiente como fonte de configuração.

    Comportamento:
        - Sem prefixo, todas as variáveis são incluídas
        - Com prefixo, apenas variáveis que começam com ele são incluídas;
          o prefixo é removido da chave quando `strip_prefix=True`
        - Chaves são convertidas para caixa baixa quando `lowercase=True`
          (a normalização acontece aqui, nunca no core)

    O mapeamento é lido em `load()`, não na construção; `environ` permite
    injetar um mapeamento explícito no lugar de `os.environ`.
    """

    def __init__(
        self,
        prefix: Optional[str] = None,
        *,
        strip_prefix: bool = True,
        lowercase: bool = True,
        environ: Optional[Mapping[str, str]] = None,
        name: str = "",
    ) -> None:
        self.prefix = prefix or ""
        self.strip_prefix = strip_prefix
        self.lowercase = lowercase
        self._environ = environ
        self.name = name or (f"env:{self.prefix}" if self.prefix else "env")

    def load(self) -> Dict[str, str]:
        environ = os.environ if self._environ is None else self._environ

        out: Dict[str, str] = {}
        for raw_key in sorted(environ):
            if self.prefix and not raw_key.startswith(self.prefix):
                continue
            key = raw_key[len(self.prefix):] if self.strip_prefix else raw_key
            if self.lowercase:
                key = key.lower()
            out[key] = environ[raw_key]
        return out

    def __repr__(self) -> str:
        return f"EnvSource(prefix={self.prefix!r}, lowercase={self.lowercase})"
