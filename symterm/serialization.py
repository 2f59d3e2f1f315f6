"""Identity-preserving graph serialization for terms.

A snapshot is flat: every reachable term is written once, as a record whose
children are referenced by id rather than nested, so shared sub-terms stay
shared and cycles do not make the writer diverge::

    {
      "id": "<root id>",
      "values": [
        {"id": "<id>", "type": "Assignment", "source": "<id>", "target": "<id>"},
        ...
      ]
    }

Ids are uppercase hex UUID4 strings. A SerializationStorage remembers the id
of every term it has written or read, so a term keeps its id across repeated
snapshots taken with the same storage.
"""

from __future__ import annotations

import json
import logging
import math
import uuid
from collections import deque
from typing import Any, Callable, Optional, Union

from symterm import Snapshot
from symterm.config import get_snapshot_indent
from symterm.errors import SymtermSerializationError, SymtermTypeError
from symterm.types import (
    Application,
    Argument,
    Assignment,
    Dereference,
    Function,
    Hold,
    IntrinsicCall,
    Null,
    Number,
    Policy,
    Release,
    Sequence,
    Symbol,
    Term,
    Tuple,
)

logger = logging.getLogger(__name__)

_VARIANTS: dict[str, type[Term]] = {
    cls.__name__: cls
    for cls in (
        Null,
        Symbol,
        Number,
        Tuple,
        Hold,
        Release,
        Sequence,
        Assignment,
        Dereference,
        Function,
        Application,
        IntrinsicCall,
    )
}
_POLICIES: dict[str, Policy] = {p.value: p for p in Policy}


class SerializationStorage:
    """Term <-> id tables shared by a series of snapshots and restores."""

    __slots__ = ("known_ids", "known_values")

    def __init__(self):
        self.known_ids: dict[Term, str] = {}
        self.known_values: dict[str, Term] = {}

    def id_for(self, term: Term) -> str:
        """Return the id of `term`, generating a fresh one on first sight."""
        ident = self.known_ids.get(term)
        if ident is None:
            ident = uuid.uuid4().hex.upper()
            self.known_ids[term] = ident
        return ident

    def remember(self, term: Term, ident: str) -> None:
        self.known_ids[term] = ident
        self.known_values[ident] = term


# --- Writing ---

def _argument_record(arg: Argument, ref: Callable[[Term], Any]) -> dict[str, Any]:
    return {"policy": arg.policy.value, "value": ref(arg.value)}


def serialize_one(term: Term, ref: Callable[[Term], Any]) -> dict[str, Any]:
    """Describe one term; `ref` maps each child to its encoded reference."""
    match term:
        case Null():
            return {"type": "Null"}
        case Symbol():
            return {"type": "Symbol", "name": term.name}
        case Number():
            if not math.isfinite(term.value):
                raise SymtermSerializationError(f"Cannot serialize non-finite number {term.value}")
            return {"type": "Number", "value": term.value}
        case Tuple():
            return {"type": "Tuple", "inner": [ref(t) for t in term.inner]}
        case Sequence():
            return {"type": "Sequence", "inner": [ref(t) for t in term.inner]}
        case Hold():
            return {"type": "Hold", "inner": ref(term.inner)}
        case Release():
            return {"type": "Release", "inner": ref(term.inner)}
        case Dereference():
            return {"type": "Dereference", "inner": ref(term.inner)}
        case Assignment():
            return {"type": "Assignment", "source": ref(term.source), "target": ref(term.target)}
        case Function():
            return {"type": "Function", "arguments": ref(term.arguments), "body": ref(term.body)}
        case Application():
            return {
                "type": "Application",
                "function": ref(term.function),
                "arguments": [_argument_record(a, ref) for a in term.arguments],
            }
        case IntrinsicCall():
            return {
                "type": "IntrinsicCall",
                "intrinsic": ref(term.intrinsic),
                "arguments": [_argument_record(a, ref) for a in term.arguments],
            }
    raise SymtermTypeError(f"Unknown term variant {type(term).__name__}")


def snapshot(root: Term, storage: Optional[SerializationStorage] = None) -> Snapshot:
    """Breadth-first flat snapshot of every term reachable from `root`.

    Records appear in discovery order, the root first.
    """
    if storage is None:
        storage = SerializationStorage()
    seen: set[Term] = {root}
    queue: deque[Term] = deque([root])

    def ref(term: Term) -> str:
        if term not in seen:
            seen.add(term)
            queue.append(term)
        return storage.id_for(term)

    root_id = storage.id_for(root)
    records: list[dict[str, Any]] = []
    while queue:
        current = queue.popleft()
        record: dict[str, Any] = {"id": storage.id_for(current)}
        record.update(serialize_one(current, ref))
        records.append(record)
    logger.debug(f"Snapshot {root_id}: {len(records)} record(s)")
    return {"id": root_id, "values": records}


def serialize(
    root: Term, storage: Optional[SerializationStorage] = None, indent: Optional[int] = -1
) -> str:
    """JSON text of `snapshot(root, storage)`.

    `indent` defaults to SYMTERM_SNAPSHOT_INDENT (2 when unset); None is compact.
    """
    if indent == -1:
        indent = get_snapshot_indent()
    return json.dumps(snapshot(root, storage), indent=indent, allow_nan=False)


def serialize_readable(term: Term, indent: Optional[int] = 2) -> str:
    """Nested JSON dump for humans. Shared terms are repeated; acyclic graphs only."""

    def nested(t: Term) -> dict[str, Any]:
        return serialize_one(t, nested)

    return json.dumps(nested(term), indent=indent, allow_nan=False)


# --- Reading ---

def _field(entry: dict[str, Any], name: str, kind: Union[type, tuple[type, ...]]) -> Any:
    if name not in entry:
        raise SymtermSerializationError(f"Record {entry.get('id')!r} is missing field {name!r}")
    value = entry[name]
    if isinstance(value, bool) or not isinstance(value, kind):
        raise SymtermSerializationError(
            f"Record {entry.get('id')!r}: field {name!r} has unexpected type {type(value).__name__}"
        )
    return value


def _arguments(entry: dict[str, Any], resolve: Callable[[Any], Term]) -> list[Argument]:
    result = []
    for item in _field(entry, "arguments", list):
        if not isinstance(item, dict):
            raise SymtermSerializationError(f"Record {entry.get('id')!r}: malformed argument {item!r}")
        policy = _POLICIES.get(item.get("policy"))
        if policy is None:
            raise SymtermSerializationError(
                f"Record {entry.get('id')!r}: unknown argument policy {item.get('policy')!r}"
            )
        result.append(Argument(policy, resolve(_field(item, "value", str))))
    return result


def deserialize_payload(entry: dict[str, Any], resolve: Callable[[Any], Term]) -> tuple:
    """Constructor arguments for the record `entry`, children resolved via `resolve`."""
    match entry["type"]:
        case "Null":
            return ()
        case "Symbol":
            return (_field(entry, "name", str),)
        case "Number":
            try:
                value = float(_field(entry, "value", (int, float)))
            except OverflowError as e:
                raise SymtermSerializationError(
                    f"Record {entry.get('id')!r}: number out of float range"
                ) from e
            if not math.isfinite(value):
                raise SymtermSerializationError(f"Record {entry.get('id')!r}: non-finite number")
            return (value,)
        case "Tuple" | "Sequence":
            return ([resolve(i) for i in _field(entry, "inner", list)],)
        case "Hold" | "Release" | "Dereference":
            return (resolve(_field(entry, "inner", str)),)
        case "Assignment":
            return (resolve(_field(entry, "source", str)), resolve(_field(entry, "target", str)))
        case "Function":
            return (resolve(_field(entry, "arguments", str)), resolve(_field(entry, "body", str)))
        case "Application":
            return (resolve(_field(entry, "function", str)), _arguments(entry, resolve))
        case "IntrinsicCall":
            return (resolve(_field(entry, "intrinsic", str)), _arguments(entry, resolve))
    raise SymtermSerializationError(f"Unknown term type {entry['type']!r}")


def _index_records(data: Any) -> tuple[str, dict[str, dict[str, Any]]]:
    if not isinstance(data, dict):
        raise SymtermSerializationError("Snapshot must be a JSON object")
    root_id = data.get("id")
    values = data.get("values")
    if not isinstance(root_id, str):
        raise SymtermSerializationError("Snapshot is missing its root id")
    if not isinstance(values, list):
        raise SymtermSerializationError("Snapshot is missing its values list")
    records: dict[str, dict[str, Any]] = {}
    for entry in values:
        if not isinstance(entry, dict) or not isinstance(entry.get("id"), str):
            raise SymtermSerializationError(f"Malformed record {entry!r}")
        if entry["id"] in records:
            raise SymtermSerializationError(f"Duplicate record id {entry['id']!r}")
        if entry.get("type") not in _VARIANTS:
            raise SymtermSerializationError(f"Unknown term type {entry.get('type')!r}")
        records[entry["id"]] = entry
    return root_id, records


def deserialize(
    data: Union[str, bytes, Snapshot], storage: Optional[SerializationStorage] = None
) -> Term:
    """Rebuild the term graph of a snapshot (JSON text or parsed dict).

    Each id becomes exactly one term: a record's term is created and memoized
    before its children are resolved, so shared references resolve to the
    same object and cyclic references close into a real cycle. Ids already
    known to `storage` resolve to the terms it remembers.
    """
    if storage is None:
        storage = SerializationStorage()
    if isinstance(data, (str, bytes, bytearray)):
        try:
            data = json.loads(data)
        except ValueError as e:
            raise SymtermSerializationError(f"Snapshot is not valid JSON: {e}") from e
    root_id, records = _index_records(data)
    memo: dict[str, Term] = {}
    built: list[tuple[Term, str]] = []

    def resolve(ident: Any) -> Term:
        if not isinstance(ident, str):
            raise SymtermSerializationError(f"Reference must be an id string, got {ident!r}")
        term = memo.get(ident)
        if term is not None:
            return term
        term = storage.known_values.get(ident)
        if term is not None:
            memo[ident] = term
            return term
        entry = records.get(ident)
        if entry is None:
            raise SymtermSerializationError(f"No record for id {ident!r}")
        cls = _VARIANTS[entry["type"]]
        # Reserve the identity before recursing into children.
        term = cls.__new__(cls)
        memo[ident] = term
        try:
            cls.__init__(term, *deserialize_payload(entry, resolve))
        except SymtermTypeError as e:
            raise SymtermSerializationError(f"Record {ident!r}: {e}") from e
        built.append((term, ident))
        return term

    root = resolve(root_id)
    # Storage only learns terms from a restore that completed.
    for term, ident in built:
        storage.remember(term, ident)
    logger.debug(f"Restored {root_id}: {len(memo)} term(s) from {len(records)} record(s)")
    return root
