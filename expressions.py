"""
Lvar abstract syntax tree
Immutable expression values shared by the parser, visualizer, interpreter
and partial evaluator
"""

from typing import Tuple, Union, Iterable
from dataclasses import dataclass


# Names with built-in meaning; every other call head is uninterpreted
ADD = "+"
SUBTRACT = "-"
READ = "read"
LET = "let"


@dataclass(frozen=True)
class Number:
    """Integer literal"""
    value: int


@dataclass(frozen=True)
class Call:
    """Operator applied to an ordered sequence of argument expressions"""
    operator: str
    args: Tuple['Expression', ...] = ()

    def __post_init__(self):
        if not isinstance(self.args, tuple):
            object.__setattr__(self, 'args', tuple(self.args))


@dataclass(frozen=True)
class Binding:
    """One (name value) pair of a let"""
    name: str
    value: 'Expression'


@dataclass(frozen=True)
class Let:
    """Sequential bindings followed by a body expression"""
    bindings: Tuple[Binding, ...]
    body: 'Expression'

    def __post_init__(self):
        object.__setattr__(self, 'bindings', make_bindings(self.bindings))


@dataclass(frozen=True)
class Var:
    """Reference to a name bound by an earlier let"""
    name: str


Expression = Union[Number, Call, Let, Var]


def make_bindings(pairs: Iterable) -> Tuple[Binding, ...]:
    """Normalise (name, value) pairs to a tuple of Binding values"""
    bindings = []
    for pair in pairs:
        if isinstance(pair, Binding):
            bindings.append(pair)
        else:
            name, value = pair
            bindings.append(Binding(name, value))
    return tuple(bindings)


def node_label(node: Expression) -> str:
    """Short description used in debug traces"""
    if isinstance(node, Call):
        return f"Call({node.operator})"
    if isinstance(node, Number):
        return f"Number({node.value})"
    if isinstance(node, Var):
        return f"Var({node.name})"
    return type(node).__name__
