import pytest

from symterm.builtins import register
from symterm.types import ExecutionContext, Symbol
from symterm.interpreter import Interpreter


@pytest.fixture
def context():
    """Return a fresh context with the standard intrinsics registered."""
    c = ExecutionContext()
    register(c)
    return c


@pytest.fixture
def itp():
    """Return an interpreter with intrinsics and the prelude loaded."""
    return Interpreter()


@pytest.fixture
def recorder():
    """An intrinsic that records each argument it sees and returns it.

    Usage: register `recorder.symbol` on a context, then inspect `recorder.seen`.
    """

    class Recorder:
        def __init__(self):
            self.symbol = Symbol("record")
            self.seen = []

        def __call__(self, context, args):
            self.seen.extend(args)
            return args[0]

    return Recorder()
