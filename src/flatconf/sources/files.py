# src/flatconf/sources/files.py
"""
Fontes baseadas em arquivo.

Este módulo implementa as fontes que leem um arquivo do disco e produzem
um mapeamento plano chave -> valor:

    - PropertiesFileSource → texto `chave=valor`, comentários com `#`
    - YamlFileSource       → YAML (PyYAML, `safe_load`)
    - JsonFileSource       → JSON

Decisões arquiteturais:
    - O formato é escolhido pela classe da fonte, nunca pela extensão
      ou pelo conteúdo do arquivo
    - Arquivo inexistente levanta `SourceNotFoundError`, permitindo ao
      builder decidir se a ausência é fatal (`ignore_not_found`)
    - Falhas de parsing são encapsuladas em `SourceLoadError`, com a
      exceção original encadeada

Invariantes:
    - O retorno é sempre um dicionário plano de strings
    - YAML/JSON: mapas aninhados viram chaves pontuadas
      (`server: {port: 80}` → `server.port=80`)
    - YAML/JSON: listas são rejeitadas (não há valores estruturados)
    - Arquivo YAML/JSON vazio equivale a mapeamento vazio

Limites explícitos:
    - Não aplica prioridade
    - Não resolve placeholders
    - Não observa o arquivo após a leitura (sem reload)
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Mapping, Union

import yaml  # PyYAML

from flatconf.core.errors import SourceLoadError, SourceNotFoundError, UnsupportedValueError
from flatconf.core.merge import stringify_scalar


PathLike = Union[str, Path]


def _read_text(name: str, path: Path, encoding: str) -> str:
    if not path.exists():
        raise SourceNotFoundError(name, f"arquivo não encontrado: {path}")
    if not path.is_file():
        raise SourceLoadError(name, f"caminho não é um arquivo: {path}")
    try:
        return path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise SourceLoadError(name, str(e)) from e


def parse_properties(text: str, *, source: str = "properties") -> Dict[str, str]:
    """
    Converte texto no formato properties em mapeamento plano.

    Regras (v1):
        - Linhas vazias são ignoradas
        - Linhas cujo primeiro caractere não branco é `#` são comentários
        - `chave=valor` é separado no primeiro `=`; chave e valor são aparados
        - Chave vazia ou linha sem `=` é erro, com o número da linha

    Raises:
        SourceLoadError: Em linha fora do formato.
    """
    out: Dict[str, str] = {}
    for lineno, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key:
            raise SourceLoadError(source, f"linha {lineno} inválida (esperado chave=valor): {raw_line!r}")
        out[key] = value.strip()
    return out


def flatten_mapping(source: str, data: Mapping[Any, Any], prefix: str = "") -> Dict[str, str]:
    """
    Achata mapas aninhados em chaves pontuadas com valores textuais.

    Chaves não textuais (ex.: `yes:` que o YAML lê como bool) passam pela
    mesma conversão escalar dos valores. Duas entradas que produzem a mesma
    chave pontuada (`{"a.b": 1, "a": {"b": 2}}`) são rejeitadas.

    Raises:
        UnsupportedValueError: Em lista, valor não escalar ou chave repetida.
    """
    out: Dict[str, str] = {}
    _flatten_into(out, source, data, prefix)
    return out


def _flatten_into(out: Dict[str, str], source: str, data: Mapping[Any, Any], prefix: str) -> None:
    for raw_key, value in data.items():
        key = prefix + stringify_scalar(source, f"{prefix}{raw_key}", raw_key)
        if isinstance(value, Mapping):
            _flatten_into(out, source, value, f"{key}.")
            continue
        if isinstance(value, (list, tuple)):
            raise UnsupportedValueError(source, f"lista não suportada na chave '{key}'")
        if key in out:
            raise UnsupportedValueError(source, f"chave pontuada repetida: '{key}'")
        out[key] = stringify_scalar(source, key, value)


class PropertiesFileSource:
    """Arquivo `.properties` (chave=valor por linha)."""

    def __init__(self, path: PathLike, *, encoding: str = "utf-8", name: str = "") -> None:
        self.path = Path(path)
        self.encoding = encoding
        self.name = name or f"properties:{self.path}"

    def load(self) -> Dict[str, str]:
        text = _read_text(self.name, self.path, self.encoding)
        return parse_properties(text, source=self.name)

    def __repr__(self) -> str:
        return f"PropertiesFileSource({str(self.path)!r})"


class _StructuredFileSource:
    kind = ""

    def __init__(self, path: PathLike, *, encoding: str = "utf-8", name: str = "") -> None:
        self.path = Path(path)
        self.encoding = encoding
        self.name = name or f"{self.kind}:{self.path}"

    def _decode(self, text: str) -> Any:
        raise NotImplementedError

    def load(self) -> Dict[str, str]:
        text = _read_text(self.name, self.path, self.encoding)
        try:
            data = self._decode(text)
        except Exception as e:
            raise SourceLoadError(self.name, str(e) or f"falha ao parsear {self.kind}") from e

        if data is None:
            return {}

        if not isinstance(data, Mapping):
            raise UnsupportedValueError(
                self.name, f"root deve ser mapping, recebido: {type(data).__name__}"
            )

        return flatten_mapping(self.name, data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self.path)!r})"


class YamlFileSource(_StructuredFileSource):
    """Arquivo YAML; mapas aninhados viram chaves pontuadas."""

    kind = "yaml"

    def _decode(self, text: str) -> Any:
        return yaml.safe_load(text)


class JsonFileSource(_StructuredFileSource):
    """Arquivo JSON; mapas aninhados viram chaves pontuadas."""

    kind = "json"

    def _decode(self, text: str) -> Any:
        if not text.strip():
            return None
        return json.loads(text)
