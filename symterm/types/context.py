"""Execution context for symterm.

The ExecutionContext is the only mutable state the evaluator touches. It holds
the current bindings of Symbols to values, the registry of intrinsics (native
functions keyed by Symbol), and an operand stack that in-language code uses to
save and restore values. Symbols are matched by identity, never by name.
"""

from __future__ import annotations

from io import StringIO
from typing import Iterable, Optional

from symterm import Intrinsic
from symterm.errors import (
    SymtermIntrinsicNotFound,
    SymtermStackUnderflow,
    SymtermTypeError,
)
from symterm.types.term import Symbol, Term, check_term


class ExecutionContext:
    """Bindings, intrinsics and operand stack of one evaluation session."""

    __slots__ = ("bindings", "intrinsics", "stack")

    def __init__(self):
        self.bindings: dict[Symbol, Term] = {}
        self.intrinsics: dict[Symbol, Intrinsic] = {}
        self.stack: list[Term] = []

    # --- Bindings ---
    def bind(self, symbol: Symbol, value: Term) -> None:
        """Bind `symbol` to `value`, replacing any previous binding.

        Raises SymtermTypeError if `symbol` is not a Symbol or `value` not a Term.
        """
        if not isinstance(symbol, Symbol):
            raise SymtermTypeError(f"Cannot bind {symbol!r}: not a Symbol")
        self.bindings[symbol] = check_term(value, "Bound value")

    def lookup(self, symbol: Symbol) -> Optional[Term]:
        return self.bindings.get(symbol)

    def is_bound(self, symbol: Symbol) -> bool:
        return symbol in self.bindings

    def unbind(self, symbol: Symbol) -> None:
        self.bindings.pop(symbol, None)

    # --- Intrinsics ---
    def register_intrinsic(self, symbol: Symbol, fn: Intrinsic) -> None:
        if not isinstance(symbol, Symbol):
            raise SymtermTypeError(f"Cannot register intrinsic under {symbol!r}: not a Symbol")
        if not callable(fn):
            raise SymtermTypeError(f"Intrinsic {symbol.name} is not callable")
        self.intrinsics[symbol] = fn

    def call_intrinsic(self, symbol: Symbol, args: Iterable[Term]) -> Term:
        """Invoke the intrinsic registered under `symbol` with (self, args).

        Raises SymtermIntrinsicNotFound if nothing is registered under `symbol`.
        """
        fn = self.intrinsics.get(symbol)
        if fn is None:
            raise SymtermIntrinsicNotFound(f"Intrinsic not found: {symbol!r}")
        result = fn(self, list(args))
        if not isinstance(result, Term):
            raise SymtermTypeError(
                f"Intrinsic {symbol!r} returned {type(result).__name__}, expected a Term"
            )
        return result

    # --- Operand stack ---
    def push(self, value: Term) -> None:
        self.stack.append(check_term(value, "Pushed value"))

    def pop(self) -> Term:
        if not self.stack:
            raise SymtermStackUnderflow("Cannot pop an empty stack")
        return self.stack.pop()

    def __repr__(self) -> str:
        with StringIO() as buffer:
            buffer.write("<ExecutionContext bindings={")
            buffer.write(", ".join(f"{k.name}: {v!r}" for k, v in self.bindings.items()))
            buffer.write("}")
            buffer.write(f" intrinsics={len(self.intrinsics)} stack={len(self.stack)}>")
            return buffer.getvalue()
