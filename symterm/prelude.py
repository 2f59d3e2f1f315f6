"""In-language standard library.

Everything here is ordinary program text: Functions bound to Symbols by
Assignments, built only from substitution, quoting and the standard
intrinsics. In particular `dynamic_scope` gets save/rebind/restore without any
support from the evaluator:

1. push a quoted Assignment that restores the symbol's current value;
2. release (run) the caller's quoted body;
3. release the popped Assignment;
4. return the body's value (via `prog1`).

The restoring Assignment is built by substituting two private template Symbols
in a quoted Assignment. Since substitution matches Symbols by identity and the
templates are never exposed, the caller's body cannot be captured by them.
"""

from __future__ import annotations

from symterm.builtins import (
    INTRINSIC_IDENTITY,
    INTRINSIC_MAKE_HOLD,
    INTRINSIC_POP,
    INTRINSIC_PUSH,
    INTRINSIC_REPLACE,
)
from symterm.evaluation.evaluator import execute
from symterm.types import (
    Application,
    Assignment,
    Dereference,
    ExecutionContext,
    Function,
    Hold,
    IntrinsicCall,
    Release,
    Sequence,
    Symbol,
    Term,
    Tuple,
    evaluated,
    held,
)

FUNCTION_REPLACE = Symbol("function_replace")
FUNCTION_MAKE_HOLD = Symbol("function_make_hold")
FUNCTION_PROG1 = Symbol("function_prog1")
FUNCTION_DYNAMIC_SCOPE = Symbol("function_dynamic_scope")

# Formal parameters
_VALUE = Symbol("argument_value")
_FROM = Symbol("argument_from")
_TO = Symbol("argument_to")
_A = Symbol("argument_a")
_FIRST = Symbol("argument_first")
_REST = Symbol("argument_rest")
_SYMBOL = Symbol("argument_symbol")
_BODY = Symbol("argument_inner")

# Placeholders of the restoring Assignment
_SAVED_VALUE = Symbol("template_value")
_SAVED_TARGET = Symbol("template_target")


def _call(function: Symbol, *arguments) -> Application:
    return Application(Dereference(function), arguments)


def replace_function() -> Function:
    """(value, from, to) -> Hold(value with from replaced by to); all three are Holds."""
    return Function(
        Tuple([_VALUE, _FROM, _TO]),
        Hold(IntrinsicCall(INTRINSIC_REPLACE, [held(_VALUE), held(_FROM), held(_TO)])),
    )


def make_hold_function() -> Function:
    return Function(Tuple([_A]), Hold(IntrinsicCall(INTRINSIC_MAKE_HOLD, [held(_A)])))


def prog1_function() -> Function:
    """(first, rest) -> first. Both arguments have already run, left to right."""
    return Function(
        Tuple([_FIRST, _REST]), Hold(IntrinsicCall(INTRINSIC_IDENTITY, [held(_FIRST)]))
    )


def dynamic_scope_function() -> Function:
    """(symbol, quoted_body) -> value of the body, with symbol restored afterwards.

    `symbol` must reach the function unevaluated (HELD policy).
    """
    restore_template = Hold(
        Assignment(IntrinsicCall(INTRINSIC_IDENTITY, [held(_SAVED_VALUE)]), _SAVED_TARGET)
    )
    restore = _call(
        FUNCTION_REPLACE,
        evaluated(
            _call(
                FUNCTION_REPLACE,
                evaluated(restore_template),
                evaluated(Hold(_SAVED_VALUE)),
                evaluated(_call(FUNCTION_MAKE_HOLD, evaluated(Dereference(_SYMBOL)))),
            )
        ),
        evaluated(Hold(_SAVED_TARGET)),
        evaluated(Hold(_SYMBOL)),
    )
    return Function(
        Tuple([_SYMBOL, _BODY]),
        Hold(
            _call(
                FUNCTION_PROG1,
                evaluated(
                    Sequence([
                        IntrinsicCall(INTRINSIC_PUSH, [evaluated(restore)]),
                        Release(_BODY),
                    ])
                ),
                evaluated(Release(IntrinsicCall(INTRINSIC_POP, []))),
            )
        ),
    )


def prelude_program() -> Sequence:
    """The Assignments that bind every prelude function."""
    return Sequence([
        Assignment(replace_function(), FUNCTION_REPLACE),
        Assignment(make_hold_function(), FUNCTION_MAKE_HOLD),
        Assignment(prog1_function(), FUNCTION_PROG1),
        Assignment(dynamic_scope_function(), FUNCTION_DYNAMIC_SCOPE),
    ])


def load_prelude(context: ExecutionContext) -> None:
    """Bind the prelude functions in `context`. Intrinsics must be registered to call them."""
    execute(prelude_program(), context)


def dynamic_scope(symbol: Symbol, body: Term) -> Application:
    """Call site running `body` with `symbol` saved and restored around it."""
    return _call(FUNCTION_DYNAMIC_SCOPE, held(symbol), evaluated(Hold(body)))
