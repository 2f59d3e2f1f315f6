"""Term base class and the leaf variants.

A Term is an immutable node. Equality and hashing are inherited unchanged from
`object`, so they are by identity: two separately constructed ``Symbol("x")``
are different terms, and substitution only ever matches the very object it was
given. Capturing "the same" binder therefore means reusing the same Symbol.
"""

from __future__ import annotations

import reprlib
from typing import Optional, TypeVar

from symterm.errors import SymtermTypeError

T = TypeVar("T", bound="Term")


class Term:
    """Base class of every term variant."""

    __slots__ = ()
    _fields: tuple[str, ...] = ()

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def _set(self, name: str, value) -> None:
        object.__setattr__(self, name, value)

    # --- Variant dispatch ---
    def is_(self, variant: type[Term]) -> bool:
        return isinstance(self, variant)

    def downcast(self, variant: type[T]) -> T:
        """Return self typed as `variant`; raise SymtermTypeError on mismatch."""
        if not isinstance(self, variant):
            raise SymtermTypeError(
                f"Expected {variant.__name__}, got {type(self).__name__}"
            )
        return self

    def try_downcast(self, variant: type[T]) -> Optional[T]:
        return self if isinstance(self, variant) else None

    @reprlib.recursive_repr()
    def __repr__(self) -> str:
        fields = ", ".join(repr(getattr(self, f, None)) for f in self._fields)
        return f"{type(self).__name__}({fields})"


def check_term(value, where: str) -> Term:
    if not isinstance(value, Term):
        raise SymtermTypeError(f"{where} must be a Term, got {type(value).__name__}")
    return value


class Null(Term):
    """Unit/absence value. Every construction is a distinct term."""

    __slots__ = ()


class Symbol(Term):
    """A name cell. The name is a label only; identity is what binds."""

    __slots__ = ("name",)
    _fields = ("name",)

    def __init__(self, name: str):
        if not isinstance(name, str):
            raise SymtermTypeError(f"Symbol name must be a string, got {type(name).__name__}")
        self._set("name", name)

    def __str__(self):
        return self.name


class Number(Term):
    __slots__ = ("value",)
    _fields = ("value",)

    def __init__(self, value: float):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise SymtermTypeError(f"Number value must be numeric, got {type(value).__name__}")
        try:
            self._set("value", float(value))
        except OverflowError as e:
            raise SymtermTypeError("Number value is out of float range") from e

    def __str__(self):
        return str(self.value)
