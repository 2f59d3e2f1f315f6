"""Substitution engine.

`replace` is capture-naive and structure-sharing: matches are by identity, and
a node is rebuilt only when one of its children actually changed. When
`from_` does not occur in `term`, the very same `term` object comes back, which
is what lets the evaluator detect "nothing changed" with an `is` check.
"""

from __future__ import annotations

from symterm.types import Term
from symterm.tree import children_of, with_children


def replace(term: Term, from_: Term, to: Term) -> Term:
    """Replace every occurrence of the object `from_` inside `term` with `to`.

    Recurses through every child, including the insides of Holds and held
    arguments. Leaves are returned unchanged unless they are `from_` itself.
    A sub-term reached along several paths is rebuilt once per path, so shared
    nodes above a match come back as separate copies.
    """
    if term is from_:
        return to
    children = children_of(term)
    if not children:
        return term
    return with_children(term, [replace(child, from_, to) for child in children])
