"""Structural term variants: tuples, quoting, sequencing and binding."""

from __future__ import annotations

from typing import Iterable

from symterm.types.term import Term, check_term


class Tuple(Term):
    """Fixed-arity list of terms (argument lists, value lists)."""

    __slots__ = ("inner",)
    _fields = ("inner",)

    def __init__(self, inner: Iterable[Term] = ()):
        self._set("inner", tuple(check_term(t, "Tuple element") for t in inner))


class Sequence(Term):
    """Statements executed left to right; the value is the last one's."""

    __slots__ = ("inner",)
    _fields = ("inner",)

    def __init__(self, inner: Iterable[Term] = ()):
        self._set("inner", tuple(check_term(t, "Sequence element") for t in inner))


class Hold(Term):
    """A quoted term: executing a Hold yields the Hold itself."""

    __slots__ = ("inner",)
    _fields = ("inner",)

    def __init__(self, inner: Term):
        self._set("inner", check_term(inner, "Hold inner"))


class Release(Term):
    """Execute `inner`, which must produce a Hold, then execute what it holds."""

    __slots__ = ("inner",)
    _fields = ("inner",)

    def __init__(self, inner: Term):
        self._set("inner", check_term(inner, "Release inner"))


class Dereference(Term):
    __slots__ = ("inner",)
    _fields = ("inner",)

    def __init__(self, inner: Term):
        self._set("inner", check_term(inner, "Dereference inner"))


class Assignment(Term):
    """Bind `target` (a Symbol, or a term executing to one) to the value of `source`."""

    __slots__ = ("source", "target")
    _fields = ("source", "target")

    def __init__(self, source: Term, target: Term):
        self._set("source", check_term(source, "Assignment source"))
        self._set("target", check_term(target, "Assignment target"))
