# tests/core/test_merge.py
"""
Testes da agregação de fontes por prioridade.

Os testes asseguram que:
- com prioridades distintas, vence a fonte de menor prioridade numérica
- com prioridades iguais, vence a fonte adicionada por último
- chaves não sobrepostas são preservadas
- o merge não muta os inputs
- prioridades inválidas são rejeitadas na captura

Invariantes:
    - A mesma entrada sempre produz a mesma saída
    - O resultado contém uma entrada por chave distinta

Limites explícitos:
    - Não valida carregamento de fontes
    - Não valida resolução de placeholders
"""

import pytest

try:
    from flatconf.core.merge import (
        DEFAULT_PRIORITY,
        HIGHEST_PRIORITY,
        RankedSource,
        aggregate_sources,
        capture_source,
    )
    from flatconf.core.errors import InvalidPriorityError, UnsupportedValueError
except Exception as e:  # noqa: BLE001
    aggregate_sources = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    """
    Garante que o módulo de merge esteja disponível para os testes.

    Falha imediatamente, com mensagem explícita, quando `aggregate_sources`
    ou `capture_source` não podem ser importados.
    """
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing merge module. Implement:\n"
            "- src/flatconf/core/merge.py (RankedSource, capture_source, aggregate_sources)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def _ranked(values, priority, sequence, name="src"):
    return capture_source(name, values, priority=priority, sequence=sequence)


def test_constants():
    _require_imports()
    assert DEFAULT_PRIORITY == 100
    assert HIGHEST_PRIORITY == 0


def test_lowest_priority_number_wins():
    """
    Verifica que, com prioridades distintas, o valor final de cada chave
    vem da fonte com a menor prioridade numérica que define a chave,
    independentemente da ordem de adição.

    Invariantes:
        - Prioridade 0 sobrescreve qualquer outra
        - Chaves definidas apenas em fontes de menor precedência são preservadas
    """
    _require_imports()
    ranked = [
        _ranked({"a": "p0", "b": "p0"}, priority=0, sequence=0),
        _ranked({"a": "p100", "c": "p100"}, priority=100, sequence=1),
        _ranked({"a": "p50", "b": "p50", "d": "p50"}, priority=50, sequence=2),
    ]
    out = aggregate_sources(ranked)
    assert out == {"a": "p0", "b": "p0", "c": "p100", "d": "p50"}


def test_equal_priority_last_added_wins():
    _require_imports()
    ranked = [
        _ranked({"k": "first", "only.first": "1"}, priority=100, sequence=0),
        _ranked({"k": "second"}, priority=100, sequence=1),
        _ranked({"k": "third"}, priority=100, sequence=2),
    ]
    out = aggregate_sources(ranked)
    assert out["k"] == "third"
    assert out["only.first"] == "1"


def test_input_order_does_not_matter():
    _require_imports()
    a = _ranked({"k": "early"}, priority=10, sequence=0)
    b = _ranked({"k": "late"}, priority=10, sequence=1)
    assert aggregate_sources([b, a]) == aggregate_sources([a, b]) == {"k": "late"}


def test_empty_input_yields_empty_config():
    _require_imports()
    assert aggregate_sources([]) == {}


def test_capture_trims_and_drops_empty_keys():
    _require_imports()
    r = capture_source("s", {"  key  ": "  value  ", "   ": "x"}, priority=5, sequence=3)
    assert isinstance(r, RankedSource)
    assert dict(r.values) == {"key": "value"}
    assert (r.priority, r.sequence, r.name) == (5, 3, "s")


def test_capture_copies_source_values():
    _require_imports()
    values = {"k": "v"}
    r = capture_source("s", values)
    values["k"] = "changed"
    assert r.values["k"] == "v"
    with pytest.raises(TypeError):
        r.values["k"] = "x"


def test_aggregate_does_not_mutate_inputs():
    _require_imports()
    a = _ranked({"k": "a"}, priority=1, sequence=0)
    b = _ranked({"k": "b"}, priority=2, sequence=1)
    out = aggregate_sources([a, b])
    out["k"] = "mutated"
    assert a.values["k"] == "a"
    assert b.values["k"] == "b"


@pytest.mark.parametrize("priority", [-1, 1.5, "10", True, None])
def test_invalid_priority_rejected(priority):
    _require_imports()
    with pytest.raises(InvalidPriorityError):
        capture_source("s", {}, priority=priority)


def test_capture_stringifies_non_string_values():
    """
    Verifica que valores não textuais de fontes customizadas passam pela
    mesma conversão escalar das fontes embutidas.
    """
    _require_imports()
    r = capture_source("s", {"on": True, "off": False, "none": None, "n": 3, "f": 0.5})
    assert dict(r.values) == {"on": "true", "off": "false", "none": "", "n": "3", "f": "0.5"}


def test_capture_rejects_structured_values():
    _require_imports()
    with pytest.raises(UnsupportedValueError):
        capture_source("s", {"k": ["a", "b"]})
