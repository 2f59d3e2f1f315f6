"""Core evaluator for symterm.

Evaluation has two phases:

- `evaluate` normalizes a term by congruence: it rewrites sub-terms bottom-up
  without touching the ExecutionContext, and repeats the rewrite step until the
  step hands back the identical object (fixed point). Holds and HELD arguments
  are opaque to it.
- `execute` normalizes, then performs the effectful rule for the term's
  variant (lookup, binding, calls, releasing quotes). Terms produced while
  executing (substituted bodies, released quotes) are normalized again before
  they run.

There is no step or depth limit: a program that does not terminate keeps
running, and very deep terms surface as Python's RecursionError.
"""

from __future__ import annotations

import logging

from symterm.errors import SymtermReleaseError, SymtermTypeError
from symterm.evaluation.apply import apply_function, call_intrinsic
from symterm.tree import children_of, with_children
from symterm.types import (
    Application,
    Argument,
    Assignment,
    Dereference,
    ExecutionContext,
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


# --- Normalization ---

def evaluate(term: Term, context: ExecutionContext) -> Term:
    """Normalize `term` to its fixed point.

    The result is returned by reference: an already-normal term comes back as
    the same object, so ``evaluate(evaluate(t), c) is evaluate(t, c)``.
    """
    steps = 0
    while True:
        result = evaluate_step(term, context)
        if result is term:
            if steps:
                logger.debug(f"Normalized in {steps} rewrite step(s)")
            return result
        term = result
        steps += 1


def evaluate_step(term: Term, context: ExecutionContext) -> Term:
    """One bottom-up congruence rewrite over `term`."""
    match term:
        case Null() | Number() | Symbol() | Hold():
            return term
        case Application():
            function = evaluate_step(term.function, context)
            arguments = _evaluate_arguments(term.arguments, context)
            if function is term.function and arguments is term.arguments:
                return term
            return Application(function, arguments)
        case IntrinsicCall():
            arguments = _evaluate_arguments(term.arguments, context)
            if arguments is term.arguments:
                return term
            return IntrinsicCall(term.intrinsic, arguments)
        case Tuple() | Sequence() | Release() | Dereference() | Assignment() | Function():
            rebuilt = with_children(
                term, [evaluate_step(child, context) for child in children_of(term)]
            )
            return _rewrite(rebuilt)
    raise SymtermTypeError(f"Unknown term variant {type(term).__name__}")


def _evaluate_arguments(
    arguments: tuple[Argument, ...], context: ExecutionContext
) -> tuple[Argument, ...]:
    new = tuple(
        arg if arg.policy is Policy.HELD else arg.with_value(evaluate_step(arg.value, context))
        for arg in arguments
    )
    if all(n is o for n, o in zip(new, arguments)):
        return arguments
    return new


def _rewrite(term: Term) -> Term:
    """Local rewrite rules that need no effects."""
    match term:
        case Release(inner=Hold() as quoted):
            return quoted.inner
        case Sequence():
            return _flatten_sequence(term)
    return term


def _flatten_sequence(term: Sequence) -> Term:
    # Intermediate results are discarded, so a nested Sequence can be spliced
    # into its parent. An empty one in last position supplies the Null result.
    elements: list[Term] = []
    changed = False
    last = len(term.inner) - 1
    for i, element in enumerate(term.inner):
        if isinstance(element, Sequence) and (element.inner or i < last):
            elements.extend(element.inner)
            changed = True
        else:
            elements.append(element)
    if len(elements) == 1:
        return elements[0]
    return Sequence(elements) if changed else term


# --- Execution ---

def execute(term: Term, context: ExecutionContext) -> Term:
    """Normalize `term`, then run it against `context` and return its value."""
    return _execute_normal(evaluate(term, context), context)


def _resolve_symbol(term: Term, context: ExecutionContext, what: str) -> Symbol:
    resolved = term if isinstance(term, Symbol) else _execute_normal(term, context)
    if not isinstance(resolved, Symbol):
        raise SymtermTypeError(f"{what} must resolve to a Symbol, got {type(resolved).__name__}")
    return resolved


def _execute_normal(term: Term, context: ExecutionContext) -> Term:
    # `term` and its children are already normalized; Hold contents are not.
    match term:
        case Null() | Number() | Hold() | Function():
            return term
        case Symbol():
            value = context.lookup(term)
            return term if value is None else value
        case Tuple():
            return with_children(term, [_execute_normal(e, context) for e in term.inner])
        case Dereference():
            symbol = _resolve_symbol(term.inner, context, "Dereference")
            value = context.lookup(symbol)
            return symbol if value is None else value
        case Sequence():
            result: Term = Null()
            for element in term.inner:
                result = _execute_normal(element, context)
            return result
        case Assignment():
            value = _execute_normal(term.source, context)
            target = _resolve_symbol(term.target, context, "Assignment target")
            context.bind(target, value)
            return Null()
        case Application():
            return apply_function(term, context, execute)
        case IntrinsicCall():
            return call_intrinsic(term, context, execute)
        case Release():
            released = _execute_normal(term.inner, context)
            quoted = released.try_downcast(Hold)
            if quoted is None:
                raise SymtermReleaseError(
                    f"Release expects a Hold, got {type(released).__name__}"
                )
            return execute(quoted.inner, context)
    raise SymtermTypeError(f"Unknown term variant {type(term).__name__}")
