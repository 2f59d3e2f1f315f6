"""Application engine for symterm.

This module centralizes call semantics for the evaluator:
- Argument resolution by per-argument policy (HELD stays syntax, EVALUATED is
  executed, left to right).
- Application of Function terms by substitution of actuals for formals.
- Dispatch of IntrinsicCall terms to the ExecutionContext's registry.

The evaluator passes its own `execute` in, so this module does not import it.
"""

from __future__ import annotations

import logging

from symterm import ExecuteFn
from symterm.errors import SymtermArityError, SymtermReleaseError, SymtermTypeError
from symterm.evaluation.replace import replace
from symterm.types import (
    Application,
    Argument,
    ExecutionContext,
    Function,
    Hold,
    IntrinsicCall,
    Policy,
    Symbol,
    Term,
    Tuple,
)

logger = logging.getLogger(__name__)


def resolve_arguments(
    arguments: tuple[Argument, ...], context: ExecutionContext, execute_fn: ExecuteFn
) -> list[Term]:
    """Return the values a callee sees for `arguments`."""
    return [
        execute_fn(arg.value, context) if arg.policy is Policy.EVALUATED else arg.value
        for arg in arguments
    ]


def formal_parameters(fn: Function) -> tuple[Symbol, ...]:
    formals = fn.arguments.try_downcast(Tuple)
    if formals is None:
        raise SymtermTypeError(
            f"Function arguments must be a Tuple, got {type(fn.arguments).__name__}"
        )
    for formal in formals.inner:
        if not isinstance(formal, Symbol):
            raise SymtermTypeError(f"Formal parameter {formal!r} is not a Symbol")
    return formals.inner


def apply_function(
    application: Application, context: ExecutionContext, execute_fn: ExecuteFn
) -> Term:
    """Apply a Function term.

    Behavior:
    - `application.function` is executed and must yield a Function.
    - The argument count must equal the formal count (SymtermArityError).
    - Arguments are resolved by policy, then each actual replaces its formal
      in the body, one pair at a time in order.
    - The substituted body must be a Hold; what it holds is executed and is
      the result of the call.
    """
    target = execute_fn(application.function, context)
    fn = target.try_downcast(Function)
    if fn is None:
        raise SymtermTypeError(f"Cannot apply non-function {type(target).__name__}")

    formals = formal_parameters(fn)
    if len(formals) != len(application.arguments):
        raise SymtermArityError(
            f"Function expects {len(formals)} argument(s), got {len(application.arguments)}"
        )

    actuals = resolve_arguments(application.arguments, context, execute_fn)
    body = fn.body
    for formal, actual in zip(formals, actuals):
        body = replace(body, formal, actual)

    quoted = body.try_downcast(Hold)
    if quoted is None:
        raise SymtermReleaseError(
            f"Function body must be a Hold after substitution, got {type(body).__name__}"
        )
    logger.debug(
        f"Applied function ({', '.join(f.name for f in formals)}) to {len(actuals)} argument(s)"
    )
    return execute_fn(quoted.inner, context)


def call_intrinsic(
    call: IntrinsicCall, context: ExecutionContext, execute_fn: ExecuteFn
) -> Term:
    symbol = call.intrinsic.try_downcast(Symbol)
    if symbol is None:
        raise SymtermTypeError(
            f"Intrinsic must be named by a Symbol, got {type(call.intrinsic).__name__}"
        )
    args = resolve_arguments(call.arguments, context, execute_fn)
    logger.debug(f"Calling intrinsic {symbol.name} with {len(args)} argument(s)")
    return context.call_intrinsic(symbol, args)
