# tests/conftest.py
"""
Fixtures compartilhados para testes do flatconf.

Este módulo define fixtures reutilizáveis que fornecem:
- conteúdo textual de fontes (properties, YAML, JSON)
- configurações planas mínimas para o resolver
- um ambiente injetável para `EnvSource`

Decisões arquiteturais:
    - Conteúdos são fornecidos como string; o teste decide se grava em disco
    - Nenhuma fixture lê `os.environ` real
    - Imports do pacote são feitos nos próprios testes

Invariantes:
    - Dados retornados são determinísticos e isolados
    - Fixtures são seguras para execução em paralelo
"""

import pytest


@pytest.fixture
def app_properties_text() -> str:
    """
    Conteúdo típico de um `app.properties`, com comentários, linhas vazias
    e espaços ao redor de chaves e valores.

    Returns:
        str: Texto no formato properties.
    """
    return """\
# servidor
server.host = localhost
server.port=8080

  # comentário indentado
server.url=http://${server.host}:${server.port}
feature.flags = a,b,c
"""


@pytest.fixture
def app_yaml_text() -> str:
    return """\
server:
  host: 10.0.0.1
  port: 9090
  tls: true
timeout: 2.5
empty:
"""


@pytest.fixture
def environment_config() -> dict:
    """
    Configuração plana com placeholder aninhado no nome.

    `server.url` depende de `environment` para descobrir qual chave de host
    deve ser consultada.
    """
    return {
        "environment": "PROD",
        "PROD.server.host": "10.10.10.10",
        "DEV.server.host": "127.0.0.1",
        "server.port": "8080",
        "server.url": "http://${${environment}.server.host}:${server.port}",
    }


@pytest.fixture
def fake_environ() -> dict:
    return {
        "APP_SERVER_PORT": "9090",
        "APP_DEBUG": "true",
        "HOME": "/home/test",
        "PATH": "/usr/bin",
    }
