# tests/sources/test_programmatic_sources.py
"""
Testes das fontes programáticas (MapSource, CallableSource, EnvSource).

Os testes asseguram que:
- valores escalares são convertidos para a representação textual canônica
- valores estruturados são rejeitados
- provedores customizados têm falhas encapsuladas em SourceLoadError
- o ambiente é filtrado por prefixo e normalizado na própria fonte
"""

import pytest

from flatconf.core.errors import SourceLoadError, UnsupportedValueError
from flatconf.sources import CallableSource, EnvSource, MapSource, Source


def test_sources_satisfy_protocol(fake_environ):
    assert isinstance(MapSource({}), Source)
    assert isinstance(CallableSource(dict), Source)
    assert isinstance(EnvSource(environ=fake_environ), Source)


def test_map_source_stringifies_scalars():
    src = MapSource({"s": "x", "i": 8080, "f": 0.5, "t": True, "n": None}, name="defaults")
    assert src.name == "defaults"
    assert src.load() == {"s": "x", "i": "8080", "f": "0.5", "t": "true", "n": ""}


@pytest.mark.parametrize("value", [[1, 2], {"nested": "x"}, object()])
def test_map_source_rejects_structured_values(value):
    with pytest.raises(UnsupportedValueError):
        MapSource({"k": value}).load()


def test_map_source_snapshots_input():
    values = {"k": "v"}
    src = MapSource(values)
    values["k"] = "changed"
    assert src.load() == {"k": "v"}


def test_callable_source_uses_function_name():
    def remote_settings():
        return {"timeout": 30}

    src = CallableSource(remote_settings)
    assert src.name == "remote_settings"
    assert src.load() == {"timeout": "30"}


def test_callable_source_wraps_provider_errors():
    def broken():
        raise RuntimeError("vault unreachable")

    with pytest.raises(SourceLoadError) as exc:
        CallableSource(broken, name="vault").load()
    assert exc.value.source == "vault"
    assert isinstance(exc.value.__cause__, RuntimeError)


def test_callable_source_requires_mapping():
    with pytest.raises(UnsupportedValueError):
        CallableSource(lambda: ["a"], name="bad").load()


def test_env_source_without_prefix_lowercases(fake_environ):
    out = EnvSource(environ=fake_environ).load()
    assert out["home"] == "/home/test"
    assert out["app_server_port"] == "9090"
    assert "HOME" not in out


def test_env_source_prefix_filter_and_strip(fake_environ):
    out = EnvSource("APP_", environ=fake_environ).load()
    assert out == {"server_port": "9090", "debug": "true"}


def test_env_source_keep_prefix_and_case(fake_environ):
    out = EnvSource("APP_", strip_prefix=False, lowercase=False, environ=fake_environ).load()
    assert out == {"APP_DEBUG": "true", "APP_SERVER_PORT": "9090"}


def test_env_source_reads_at_load_time(monkeypatch):
    src = EnvSource("FLATCONF_TEST_")
    monkeypatch.setenv("FLATCONF_TEST_LATE", "yes")
    assert src.load() == {"late": "yes"}
