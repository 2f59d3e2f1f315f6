import json
import re

import pytest
from hypothesis import given

from symterm.errors import SymtermSerializationError
from symterm.serialization import (
    SerializationStorage,
    deserialize,
    serialize,
    serialize_readable,
    snapshot,
)
from symterm.types import (
    Application,
    Assignment,
    Dereference,
    Hold,
    Null,
    Number,
    Policy,
    Sequence,
    Symbol,
    Tuple,
    evaluated,
    held,
)
from term_strategies import shape_equal, terms

ID = re.compile(r"^[0-9A-F]{32}$")


def test_snapshot_is_breadth_first():
    a, b = Symbol("a"), Symbol("b")
    root = Tuple([Hold(a), b])
    data = snapshot(root)
    types = [r["type"] for r in data["values"]]
    assert types == ["Tuple", "Hold", "Symbol", "Symbol"]
    assert data["values"][0]["id"] == data["id"]
    assert data["values"][2]["name"] == "b"
    assert data["values"][3]["name"] == "a"


def test_children_are_referenced_by_id():
    a = Symbol("a")
    data = snapshot(Assignment(Number(1.0), a))
    by_id = {r["id"]: r for r in data["values"]}
    root = by_id[data["id"]]
    assert by_id[root["source"]] == {"id": root["source"], "type": "Number", "value": 1.0}
    assert by_id[root["target"]]["name"] == "a"


def test_ids_are_uppercase_hex():
    data = snapshot(Tuple([Null(), Symbol("x")]))
    assert ID.match(data["id"])
    assert all(ID.match(r["id"]) for r in data["values"])


def test_shared_terms_are_written_once_and_stay_shared():
    x = Symbol("x")
    shared = Hold(x)
    root = Tuple([shared, shared, x])
    data = snapshot(root)
    assert len(data["values"]) == 3
    restored = deserialize(serialize(root))
    first, second, third = restored.inner
    assert first is second
    assert first.inner is third
    assert third is not x


def test_argument_policies_survive():
    f, x = Symbol("f"), Symbol("x")
    call = Application(Dereference(f), [held(x), evaluated(Number(2.0))])
    restored = deserialize(serialize(call))
    assert [a.policy for a in restored.arguments] == [Policy.HELD, Policy.EVALUATED]
    assert restored.arguments[0].value.name == "x"
    assert restored.arguments[1].value.value == 2.0


def test_cyclic_snapshot_builds_a_real_cycle():
    text = json.dumps({
        "id": "T",
        "values": [
            {"id": "T", "type": "Tuple", "inner": ["H", "T"]},
            {"id": "H", "type": "Hold", "inner": "T"},
        ],
    })
    root = deserialize(text)
    assert root.inner[1] is root
    assert root.inner[0].inner is root
    # Writing the cycle back out terminates and keeps one record per term.
    assert len(snapshot(root)["values"]) == 2
    assert "..." in repr(root)


def test_storage_keeps_ids_stable():
    storage = SerializationStorage()
    a = Symbol("a")
    root = Tuple([a])
    first = snapshot(root, storage)
    second = snapshot(Hold(a), storage)
    a_id = first["values"][1]["id"]
    assert second["values"][1]["id"] == a_id
    assert storage.known_ids[a] == a_id


def test_storage_returns_the_same_object_on_repeated_restore():
    storage = SerializationStorage()
    text = serialize(Sequence([Symbol("a"), Number(1.0)]))
    assert deserialize(text, storage) is deserialize(text, storage)
    assert deserialize(text) is not deserialize(text)


def test_restore_after_write_builds_fresh_terms_once():
    storage = SerializationStorage()
    a = Symbol("a")
    text = serialize(Tuple([a]), storage)
    # Only ids are remembered on write; restoring builds fresh terms, then remembers them.
    restored = deserialize(text, storage)
    assert restored.inner[0] is not a
    assert deserialize(text, storage) is restored


def _snapshot_with(*records, root="R"):
    return {"id": root, "values": list(records)}


@pytest.mark.parametrize(
    "data",
    [
        "not json {",
        "[1, 2]",
        {"values": []},
        {"id": "R"},
        _snapshot_with({"id": "R", "type": "Banana"}),
        _snapshot_with({"id": "R", "type": "Hold", "inner": "missing"}),
        _snapshot_with({"id": "R", "type": "Null"}, {"id": "R", "type": "Null"}),
        _snapshot_with({"id": "R", "type": "Symbol", "name": 7}),
        _snapshot_with({"id": "R", "type": "Tuple", "inner": "R"}),
        _snapshot_with({"id": "R", "type": "Number"}),
        _snapshot_with({"id": "R", "type": "Number", "value": True}),
        _snapshot_with(
            {"id": "R", "type": "IntrinsicCall", "intrinsic": "S",
             "arguments": [{"policy": "lazy", "value": "S"}]},
            {"id": "S", "type": "Symbol", "name": "op"},
        ),
        '{"id": "R", "values": [{"id": "R", "type": "Number", "value": NaN}]}',
        '{"id": "R", "values": [{"id": "R", "type": "Number", "value": ' + "9" * 400 + "}]}",
    ],
    ids=[
        "invalid-json", "not-object", "no-root-id", "no-values", "unknown-type",
        "dangling-reference", "duplicate-id", "wrong-field-type", "inner-not-list",
        "missing-field", "bool-number", "bad-policy", "nan", "float-overflow",
    ],
)
def test_malformed_snapshots_are_rejected(data):
    with pytest.raises(SymtermSerializationError):
        deserialize(data)


def test_non_finite_numbers_cannot_be_serialized():
    with pytest.raises(SymtermSerializationError):
        serialize(Tuple([Number(float("inf"))]))


def test_indent_comes_from_environment(monkeypatch):
    root = Tuple([Null()])
    monkeypatch.setenv("SYMTERM_SNAPSHOT_INDENT", "none")
    assert "\n" not in serialize(root)
    monkeypatch.setenv("SYMTERM_SNAPSHOT_INDENT", "4")
    assert '\n    "id"' in serialize(root)
    assert "\n" not in serialize(root, indent=None)


def test_readable_form_nests_children():
    text = serialize_readable(Hold(Number(5.0)))
    assert json.loads(text) == {"type": "Hold", "inner": {"type": "Number", "value": 5.0}}


@given(terms)
def test_round_trip_preserves_shape(term):
    assert shape_equal(deserialize(serialize(term)), term)


def test_failed_restore_leaves_storage_untouched():
    storage = SerializationStorage()
    # P fails on its target after its child C has already been built.
    broken = {
        "id": "P",
        "values": [
            {"id": "P", "type": "Assignment", "source": "C", "target": 5},
            {"id": "C", "type": "Hold", "inner": "P"},
        ],
    }
    with pytest.raises(SymtermSerializationError):
        deserialize(broken, storage)
    assert storage.known_values == {}
    assert storage.known_ids == {}
    # A later snapshot naming the same id builds its own graph.
    good = {
        "id": "C",
        "values": [
            {"id": "C", "type": "Hold", "inner": "P"},
            {"id": "P", "type": "Assignment", "source": "N", "target": "S"},
            {"id": "N", "type": "Number", "value": 1.0},
            {"id": "S", "type": "Symbol", "name": "a"},
        ],
    }
    restored = deserialize(good, storage)
    assert restored.inner.source.value == 1.0
    assert restored.inner.target.name == "a"
    assert storage.known_values["C"] is restored
