import pytest

from symterm.errors import SymtermTypeError
from symterm.types import (
    VARIANTS,
    Application,
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
    Term,
    Tuple,
    evaluated,
    held,
)


def test_symbols_with_the_same_name_are_distinct():
    a1 = Symbol("x")
    a2 = Symbol("x")
    assert a1 != a2
    assert a1 is not a2
    assert a1 == a1
    assert len({a1: 1, a2: 2}) == 2


def test_every_construction_is_a_new_term():
    assert Null() != Null()
    assert Number(1.0) != Number(1.0)
    x = Symbol("x")
    assert Hold(x) != Hold(x)


def test_terms_are_immutable():
    s = Symbol("x")
    with pytest.raises(AttributeError):
        s.name = "y"
    h = Hold(s)
    with pytest.raises(AttributeError):
        h.inner = Null()
    with pytest.raises(AttributeError):
        del h.inner
    with pytest.raises(AttributeError):
        held(s).value = Null()


def test_is_and_downcast():
    n = Number(2.5)
    assert n.is_(Number)
    assert n.is_(Term)
    assert not n.is_(Symbol)
    assert n.downcast(Number) is n
    assert n.try_downcast(Number) is n
    assert n.try_downcast(Hold) is None


def test_downcast_mismatch_is_fatal():
    with pytest.raises(SymtermTypeError, match="Expected Function, got Number"):
        Number(1.0).downcast(Function)


def test_number_payload_is_float():
    n = Number(3)
    assert isinstance(n.value, float)
    assert n.value == 3.0
    with pytest.raises(SymtermTypeError):
        Number(True)
    with pytest.raises(SymtermTypeError):
        Number("3")
    with pytest.raises(SymtermTypeError, match="out of float range"):
        Number(10 ** 400)


def test_symbol_name_must_be_text():
    with pytest.raises(SymtermTypeError):
        Symbol(42)


def test_children_must_be_terms():
    with pytest.raises(SymtermTypeError):
        Tuple([Null(), 1.0])
    with pytest.raises(SymtermTypeError):
        Hold("x")
    with pytest.raises(SymtermTypeError):
        Assignment(Null(), None)


def test_call_arguments_must_carry_a_policy():
    x = Symbol("x")
    with pytest.raises(SymtermTypeError):
        Application(x, [x])
    with pytest.raises(SymtermTypeError):
        IntrinsicCall(x, [Number(1.0)])


def test_argument_policies():
    x = Symbol("x")
    assert held(x).policy is Policy.HELD
    assert evaluated(x).policy is Policy.EVALUATED
    assert held(x).value is x
    arg = evaluated(x)
    assert arg.with_value(x) is arg
    replaced = arg.with_value(Null())
    assert replaced is not arg
    assert replaced.policy is Policy.EVALUATED


def test_payload_fields():
    x, y = Symbol("x"), Symbol("y")
    body = Hold(x)
    fn = Function(Tuple([x, y]), body)
    assert fn.arguments.inner == (x, y)
    assert fn.body is body
    assign = Assignment(Number(1.0), x)
    assert assign.target is x
    assert Sequence().inner == ()
    assert Release(body).inner is body
    assert Dereference(x).inner is x


def test_repr():
    assert repr(Symbol("x")) == "Symbol('x')"
    assert repr(Hold(Number(1.0))) == "Hold(Number(1.0))"
    assert repr(Null()) == "Null()"
    assert repr(held(Symbol("f"))) == "held(Symbol('f'))"


def test_variant_set_is_closed():
    assert len(VARIANTS) == 12
    assert all(issubclass(v, Term) for v in VARIANTS)
