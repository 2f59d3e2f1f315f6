"""Standard intrinsics for the symterm runtime.

Each intrinsic is a plain function ``fn(context, args) -> Term`` registered
under a module-level Symbol. Programs call them with
``IntrinsicCall(INTRINSIC_..., [...])``; because Symbols match by identity,
they must use these exact Symbol objects. Every intrinsic checks its own
arity and argument variants.
"""
from __future__ import annotations

import logging
import math

from symterm import Intrinsic
from symterm.errors import SymtermArityError, SymtermTypeError
from symterm.evaluation.replace import replace
from symterm.serialization import serialize_readable
from symterm.types import ExecutionContext, Hold, Null, Number, Symbol, Term

logger = logging.getLogger(__name__)

INTRINSIC_REPLACE = Symbol("intrinsic_replace")
INTRINSIC_MAKE_HOLD = Symbol("intrinsic_make_hold")
INTRINSIC_IDENTITY = Symbol("intrinsic_identity")
INTRINSIC_PUSH = Symbol("intrinsic_push")
INTRINSIC_POP = Symbol("intrinsic_pop")
INTRINSIC_PRINT = Symbol("intrinsic_print")
INTRINSIC_PRINT_HASH = Symbol("intrinsic_print_hash")
INTRINSIC_FLOAT_ADD = Symbol("intrinsic_floating_point_number_add")
INTRINSIC_FLOAT_SUB = Symbol("intrinsic_floating_point_number_sub")
INTRINSIC_FLOAT_MUL = Symbol("intrinsic_floating_point_number_mul")
INTRINSIC_FLOAT_DIV = Symbol("intrinsic_floating_point_number_div")


def _expect_arity(name: str, args: list[Term], count: int) -> None:
    if len(args) != count:
        raise SymtermArityError(f"{name} requires exactly {count} argument(s), got {len(args)}")


def _expect(name: str, arg: Term, variant: type):
    if not isinstance(arg, variant):
        raise SymtermTypeError(
            f"{name} expects {variant.__name__} arguments, got {type(arg).__name__}"
        )
    return arg


# -------------------------------
# Quoting and substitution
# -------------------------------
def intrinsic_replace(context: ExecutionContext, args: list[Term]) -> Term:
    """(value, from, to), all Holds -> Hold(replace(value, from, to)) on their insides."""
    _expect_arity("replace", args, 3)
    value, from_, to = (_expect("replace", a, Hold) for a in args)
    return Hold(replace(value.inner, from_.inner, to.inner))


def intrinsic_make_hold(context: ExecutionContext, args: list[Term]) -> Term:
    _expect_arity("make_hold", args, 1)
    return Hold(args[0])


def intrinsic_identity(context: ExecutionContext, args: list[Term]) -> Term:
    _expect_arity("identity", args, 1)
    return args[0]


# -------------------------------
# Operand stack
# -------------------------------
def intrinsic_push(context: ExecutionContext, args: list[Term]) -> Term:
    _expect_arity("push", args, 1)
    context.push(args[0])
    return Null()


def intrinsic_pop(context: ExecutionContext, args: list[Term]) -> Term:
    _expect_arity("pop", args, 0)
    return context.pop()


# -------------------------------
# Output
# -------------------------------
def intrinsic_print(context: ExecutionContext, args: list[Term]) -> Term:
    """Write the argument as readable JSON to stdout."""
    _expect_arity("print", args, 1)
    print(serialize_readable(args[0]))
    return Null()


def intrinsic_print_hash(context: ExecutionContext, args: list[Term]) -> Term:
    """Write the identity hash of the argument; equal hashes mean the same term."""
    _expect_arity("print_hash", args, 1)
    print(hash(args[0]))
    return Null()


# -------------------------------
# Arithmetic
# -------------------------------
def _binary(name: str, args: list[Term]) -> tuple[float, float]:
    _expect_arity(name, args, 2)
    a, b = (_expect(name, x, Number) for x in args)
    return a.value, b.value


def intrinsic_float_add(context: ExecutionContext, args: list[Term]) -> Term:
    a, b = _binary("float_add", args)
    return Number(a + b)


def intrinsic_float_sub(context: ExecutionContext, args: list[Term]) -> Term:
    a, b = _binary("float_sub", args)
    return Number(a - b)


def intrinsic_float_mul(context: ExecutionContext, args: list[Term]) -> Term:
    a, b = _binary("float_mul", args)
    return Number(a * b)


def intrinsic_float_div(context: ExecutionContext, args: list[Term]) -> Term:
    a, b = _binary("float_div", args)
    if b == 0.0:
        # IEEE semantics rather than ZeroDivisionError
        if a == 0.0 or math.isnan(a):
            return Number(math.nan)
        return Number(math.copysign(math.inf, a) * math.copysign(1.0, b))
    return Number(a / b)


INTRINSICS: dict[Symbol, Intrinsic] = {
    INTRINSIC_REPLACE: intrinsic_replace,
    INTRINSIC_MAKE_HOLD: intrinsic_make_hold,
    INTRINSIC_IDENTITY: intrinsic_identity,
    INTRINSIC_PUSH: intrinsic_push,
    INTRINSIC_POP: intrinsic_pop,
    INTRINSIC_PRINT: intrinsic_print,
    INTRINSIC_PRINT_HASH: intrinsic_print_hash,
    INTRINSIC_FLOAT_ADD: intrinsic_float_add,
    INTRINSIC_FLOAT_SUB: intrinsic_float_sub,
    INTRINSIC_FLOAT_MUL: intrinsic_float_mul,
    INTRINSIC_FLOAT_DIV: intrinsic_float_div,
}


def register(context: ExecutionContext) -> None:
    """Register all standard intrinsics into the given context."""
    for symbol, fn in INTRINSICS.items():
        context.register_intrinsic(symbol, fn)
    logger.debug(f"Registered {len(INTRINSICS)} intrinsic(s)")
