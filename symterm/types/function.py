"""Functions, call sites, and per-argument evaluation policy."""

from __future__ import annotations

import reprlib
from enum import Enum
from typing import Iterable

from symterm.errors import SymtermTypeError
from symterm.types.term import Term, check_term


class Policy(Enum):
    HELD = "held"
    EVALUATED = "evaluated"


class Argument:
    """One call-site argument: the term as written plus its evaluation policy.

    HELD arguments reach the callee as syntax. EVALUATED arguments are
    normalized with the enclosing expression and executed before the call.
    """

    __slots__ = ("policy", "value")

    def __init__(self, policy: Policy, value: Term):
        if not isinstance(policy, Policy):
            raise SymtermTypeError(f"Argument policy must be a Policy, got {policy!r}")
        object.__setattr__(self, "policy", policy)
        object.__setattr__(self, "value", check_term(value, "Argument value"))

    def __setattr__(self, name, value):
        raise AttributeError("Argument is immutable")

    def with_value(self, value: Term) -> Argument:
        """Same policy, new value; returns self when `value` is the current one."""
        if value is self.value:
            return self
        return Argument(self.policy, value)

    @reprlib.recursive_repr()
    def __repr__(self) -> str:
        return f"{self.policy.value}({self.value!r})"


def held(value: Term) -> Argument:
    return Argument(Policy.HELD, value)


def evaluated(value: Term) -> Argument:
    return Argument(Policy.EVALUATED, value)


def _check_arguments(arguments: Iterable[Argument], where: str) -> tuple[Argument, ...]:
    result = tuple(arguments)
    for arg in result:
        if not isinstance(arg, Argument):
            raise SymtermTypeError(
                f"{where} arguments must be held(...) or evaluated(...), got {type(arg).__name__}"
            )
    return result


class Function(Term):
    """A closure template: a Tuple of formal Symbols and a (Hold) body.

    Functions do not capture an environment. Applying one substitutes each
    actual argument for its formal Symbol throughout the body.
    """

    __slots__ = ("arguments", "body")
    _fields = ("arguments", "body")

    def __init__(self, arguments: Term, body: Term):
        self._set("arguments", check_term(arguments, "Function arguments"))
        self._set("body", check_term(body, "Function body"))


class Application(Term):
    __slots__ = ("function", "arguments")
    _fields = ("function", "arguments")

    def __init__(self, function: Term, arguments: Iterable[Argument] = ()):
        self._set("function", check_term(function, "Application function"))
        self._set("arguments", _check_arguments(arguments, "Application"))


class IntrinsicCall(Term):
    """Call of a native function registered under the `intrinsic` Symbol."""

    __slots__ = ("intrinsic", "arguments")
    _fields = ("intrinsic", "arguments")

    def __init__(self, intrinsic: Term, arguments: Iterable[Argument] = ()):
        self._set("intrinsic", check_term(intrinsic, "IntrinsicCall intrinsic"))
        self._set("arguments", _check_arguments(arguments, "IntrinsicCall"))
