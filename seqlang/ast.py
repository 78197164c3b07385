"""Abstract Syntax Tree (AST) definitions for seqlang.

Expressions and statements are two closed families of dataclasses.
The interpreter dispatches on the concrete class; every node owns its
children outright and nothing in the tree is shared, so there are no
cycles. String literals never reach the tree as strings: the parser
turns them into a ``SequenceInit`` of character codes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union


@dataclass
class Node:
    """Base class for all AST nodes."""
    pass


###############################################################################
# Expressions
###############################################################################


@dataclass
class Expr(Node):
    pass


@dataclass
class LiteralInt(Expr):
    value: int


@dataclass
class SequenceInit(Expr):
    elements: List[Expr] = field(default_factory=list)


@dataclass
class Variable(Expr):
    name: str


# Operator spellings accepted by BinaryOp.op, in source form.
BINARY_OPS = ('+', '-', '*', '/', '&&', '||', '<', '==', '[')


@dataclass
class BinaryOp(Expr):
    op: str  # one of BINARY_OPS; '[' is indexing
    left: Expr
    right: Expr


@dataclass
class Len(Expr):
    operand: Expr


###############################################################################
# Statements
###############################################################################


@dataclass
class Stmt(Node):
    pass


@dataclass
class Print(Stmt):
    expr: Expr


@dataclass
class Compound(Stmt):
    statements: List[Stmt] = field(default_factory=list)


@dataclass
class If(Stmt):
    condition: Expr
    body: Stmt


@dataclass
class While(Stmt):
    condition: Expr
    body: Stmt


@dataclass
class Assignment(Stmt):
    name: str
    index: Optional[Expr]  # set for `name[index] = expr`
    expr: Expr


@dataclass
class Push(Stmt):
    sequence: Expr
    value: Expr


@dataclass
class Program(Node):
    body: List[Stmt]


AnyNode = Union[Expr, Stmt, Program]
