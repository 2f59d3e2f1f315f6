# Hypothesis strategies and comparison helpers shared by the property tests.

from hypothesis import strategies as st

from symterm.tree import children_of
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
    Tuple,
)

symbols = st.text(min_size=1, max_size=6).map(Symbol)
numbers = st.floats(allow_nan=False, allow_infinity=False).map(Number)
leaves = st.one_of(st.builds(Null), symbols, numbers)


def _extend(children):
    lists = st.lists(children, max_size=4)
    arguments = st.lists(st.builds(Argument, st.sampled_from(list(Policy)), children), max_size=3)
    return st.one_of(
        lists.map(Tuple),
        lists.map(Sequence),
        children.map(Hold),
        children.map(Release),
        children.map(Dereference),
        st.builds(Assignment, children, children),
        st.builds(Function, st.lists(symbols, max_size=3).map(Tuple), children.map(Hold)),
        st.builds(Application, children, arguments),
        st.builds(IntrinsicCall, symbols, arguments),
    )


terms = st.recursive(leaves, _extend, max_leaves=25)


def subterms(term):
    """Every term reachable from `term`, including itself (acyclic graphs only)."""
    found = [term]
    for child in children_of(term):
        found.extend(subterms(child))
    return found


def shape_equal(a, b) -> bool:
    """Same variants, same leaf payloads and argument policies, recursively."""
    if type(a) is not type(b):
        return False
    if isinstance(a, Symbol):
        return a.name == b.name
    if isinstance(a, Number):
        return a.value == b.value
    if isinstance(a, (Application, IntrinsicCall)):
        if [x.policy for x in a.arguments] != [y.policy for y in b.arguments]:
            return False
    ca, cb = children_of(a), children_of(b)
    return len(ca) == len(cb) and all(shape_equal(x, y) for x, y in zip(ca, cb))
