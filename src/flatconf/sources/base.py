# src/flatconf/sources/base.py
"""
Contrato canônico de fonte de configuração.

Uma fonte é qualquer objeto que, chamado uma única vez, produz um
mapeamento plano chave -> valor (strings). O builder trata todas as fontes
de forma uniforme através deste protocolo; arquivos, ambiente, valores
programáticos e provedores customizados são apenas implementações.

Princípios fundamentais:
    - A fonte é pré-configurada (caminho, prefixo, mapa literal) antes de
      ser entregue ao builder
    - Conformidade é garantida por duck typing (@runtime_checkable)
    - Normalizações de chave (ex.: caixa baixa) pertencem à fonte, não ao core

Invariantes:
    - `load` retorna apenas valores escalares convertidos para string
    - Origem inexistente é sinalizada com `SourceNotFoundError`
    - Qualquer outra falha é sinalizada com `SourceLoadError`

Limites explícitos:
    - Não aplica prioridade nem precedência
    - Não resolve placeholders
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Protocol, runtime_checkable

from flatconf.core.errors import SourceLoadError, UnsupportedValueError
from flatconf.core.merge import stringify_scalar  # noqa: F401


@runtime_checkable
class Source(Protocol):
    """
    Contrato de uma fonte de configuração.

    Atributos obrigatórios:
        - name: identificador legível, usado em eventos e mensagens de erro

    Decisões arquiteturais:
        - O protocolo não impõe herança, apenas conformidade estrutural
        - `load` é chamado no máximo uma vez por build
    """

    name: str

    def load(self) -> Mapping[str, str]:
        """Produz o mapeamento plano da fonte."""
        ...


class MapSource:
    """Fonte programática a partir de um mapeamento literal."""

    def __init__(self, values: Mapping[str, Any], name: str = "map") -> None:
        self.name = name
        self._values = dict(values)

    def load(self) -> Dict[str, str]:
        return {
            str(key): stringify_scalar(self.name, str(key), value)
            for key, value in self._values.items()
        }

    def __repr__(self) -> str:
        return f"MapSource(name={self.name!r}, keys={len(self._values)})"


class CallableSource:
    """
    Adapta um provedor customizado (callable sem argumentos) ao protocolo.

    O retorno do callable deve ser um mapeamento; valores passam pela mesma
    conversão escalar de `MapSource`. Exceções levantadas pelo provedor que
    não sejam `SourceLoadError` são encapsuladas.
    """

    def __init__(self, func: Callable[[], Mapping[str, Any]], name: str = "") -> None:
        self.name = name or getattr(func, "__name__", "callable")
        self._func = func

    def load(self) -> Dict[str, str]:
        try:
            data = self._func()
        except SourceLoadError:
            raise
        except Exception as e:
            raise SourceLoadError(self.name, str(e) or type(e).__name__) from e

        if not isinstance(data, Mapping):
            raise UnsupportedValueError(
                self.name, f"provedor deve retornar mapping, recebido: {type(data).__name__}"
            )
        return MapSource(data, name=self.name).load()
