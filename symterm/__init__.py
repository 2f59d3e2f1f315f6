# Core type aliases for symterm's data model.
# Terms are instances of the classes in symterm.types; every variant is an
# immutable object whose equality and hash are its identity. Two structurally
# identical terms are distinct unless they are the same object.
#
# Naming guidance:
# - Intrinsic: a native function exposed to programs, called as fn(context, args).
# - ExecuteFn: the evaluator entry point handed to application helpers.
# - Snapshot:  the parsed JSON form produced by symterm.serialization.snapshot.

from typing import Any, Callable

# Native function registered in an ExecutionContext: (context, list[Term]) -> Term
Intrinsic = Callable[..., Any]

# Evaluator function type: (term, context) -> Term
ExecuteFn = Callable[..., Any]

# Parsed snapshot: {"id": ..., "values": [...]}
Snapshot = dict[str, Any]

__version__ = "0.1.0"
