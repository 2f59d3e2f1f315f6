from symterm.types.term import Term, Null, Symbol, Number
from symterm.types.structure import (
    Tuple,
    Sequence,
    Hold,
    Release,
    Dereference,
    Assignment,
)
from symterm.types.function import (
    Policy,
    Argument,
    held,
    evaluated,
    Function,
    Application,
    IntrinsicCall,
)
from symterm.types.context import ExecutionContext

# Closed set of term variants; every tree walker handles exactly these.
VARIANTS: tuple[type[Term], ...] = (
    Null,
    Symbol,
    Number,
    Tuple,
    Hold,
    Release,
    Sequence,
    Assignment,
    Dereference,
    Function,
    Application,
    IntrinsicCall,
)
