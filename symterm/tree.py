"""Generic tree navigation over terms.

`children_of` decomposes any term into its ordered child terms and
`with_children` rebuilds a term of the same variant from a new child list. The
pair is the single place that knows the shape of every variant; substitution
and external tooling (editors, printers) are written against it.

Child order per variant:
- Null, Symbol, Number: no children
- Tuple, Sequence: the elements
- Hold, Release, Dereference: [inner]
- Assignment: [source, target]
- Function: [arguments, body]
- Application: [function, *argument values]
- IntrinsicCall: [intrinsic, *argument values]

`with_children(t, children_of(t))` returns `t` itself.
"""

from __future__ import annotations

from typing import Iterable

from symterm.errors import SymtermArityError, SymtermTypeError
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
    Release,
    Sequence,
    Symbol,
    Term,
    Tuple,
)


def children_of(term: Term) -> list[Term]:
    match term:
        case Null() | Symbol() | Number():
            return []
        case Tuple() | Sequence():
            return list(term.inner)
        case Hold() | Release() | Dereference():
            return [term.inner]
        case Assignment():
            return [term.source, term.target]
        case Function():
            return [term.arguments, term.body]
        case Application():
            return [term.function, *(arg.value for arg in term.arguments)]
        case IntrinsicCall():
            return [term.intrinsic, *(arg.value for arg in term.arguments)]
    raise SymtermTypeError(f"Unknown term variant {type(term).__name__}")


def _expect(term: Term, children: list[Term], count: int) -> None:
    if len(children) != count:
        raise SymtermArityError(
            f"{type(term).__name__} takes {count} child(ren), got {len(children)}"
        )


def _with_values(arguments: tuple[Argument, ...], values: list[Term]) -> tuple[Argument, ...]:
    return tuple(arg.with_value(value) for arg, value in zip(arguments, values))


def with_children(term: Term, children: Iterable[Term]) -> Term:
    """Rebuild `term` with `children`, keeping its variant and argument policies.

    Returns `term` itself when every child is identical to the current one.
    Tuple and Sequence accept any number of children; all other variants
    require exactly their current count (SymtermArityError otherwise).
    """
    new = list(children)
    old = children_of(term)
    if len(new) == len(old) and all(n is o for n, o in zip(new, old)):
        return term

    match term:
        case Null() | Symbol() | Number():
            _expect(term, new, 0)
        case Tuple():
            return Tuple(new)
        case Sequence():
            return Sequence(new)
        case Hold():
            _expect(term, new, 1)
            return Hold(new[0])
        case Release():
            _expect(term, new, 1)
            return Release(new[0])
        case Dereference():
            _expect(term, new, 1)
            return Dereference(new[0])
        case Assignment():
            _expect(term, new, 2)
            return Assignment(new[0], new[1])
        case Function():
            _expect(term, new, 2)
            return Function(new[0], new[1])
        case Application():
            _expect(term, new, len(old))
            return Application(new[0], _with_values(term.arguments, new[1:]))
        case IntrinsicCall():
            _expect(term, new, len(old))
            return IntrinsicCall(new[0], _with_values(term.arguments, new[1:]))
    raise SymtermTypeError(f"Unknown term variant {type(term).__name__}")
