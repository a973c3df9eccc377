"""flatconf — fontes de configuração.

Implementações do protocolo `Source`:
 - valores programáticos (MapSource, CallableSource)
 - variáveis de ambiente (EnvSource)
 - arquivos properties, YAML e JSON
"""

from .base import CallableSource, MapSource, Source, stringify_scalar  # noqa: F401
from .env import EnvSource  # noqa: F401
from .files import (  # noqa: F401
    JsonFileSource,
    PropertiesFileSource,
    YamlFileSource,
    flatten_mapping,
    parse_properties,
)
