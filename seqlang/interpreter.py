"""Tree-walking interpreter for seqlang.

``Interpreter`` evaluates expressions to values and executes statements
against a single, flat ``Environment``. Sequences are reference counted
by hand: every evaluation that yields a sequence hands the caller one
reference, and whoever receives it either stores it (the environment)
or releases it before returning, including when an error is raised.
"""

from __future__ import annotations

import sys
from typing import Iterable, Optional, TextIO, Union

from .ast import (
    Expr, LiteralInt, SequenceInit, Variable, BinaryOp, Len,
    Stmt, Print, Compound, If, While, Assignment, Push, Program,
)
from .environment import Environment
from .errors import DivideByZero, TypeMismatch
from .parser import Parser
from .types import Sequence, SequenceHeap, Value, release, to_text, type_name


def require_int(value: Value) -> int:
    if not isinstance(value, int):
        release(value)
        raise TypeMismatch()
    return value


def require_seq(value: Value) -> Sequence:
    if not isinstance(value, Sequence):
        raise TypeMismatch()
    return value


def truncate_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def sequence_less(a: Sequence, b: Sequence) -> bool:
    for x, y in zip(a.items, b.items):
        if x != y:
            return x < y
    return a.count < b.count


class Interpreter:
    """Core interpreter that executes seqlang statements."""
    def __init__(self, debug_level: int = 0, debug_file: str = 'debug.txt', out: Optional[TextIO] = None):
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w') if debug_level > 0 else None
        self.out = out
        self.heap = SequenceHeap(on_event=self.debug if debug_level >= 4 else None)
        self.env = Environment()

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    # Public API
    def run(self, program: Union[Program, Iterable[Stmt]]) -> Environment:
        """Execute every statement, then tear down the environment."""
        statements = program.body if isinstance(program, Program) else program
        try:
            for stmt in statements:
                if self.debug_level >= 1:
                    self.debug(f"execute {type(stmt).__name__}")
                self.execute(stmt)
        finally:
            self.close()
        return self.env

    def run_source(self, source: Union[str, TextIO]) -> Environment:
        """Parse and execute one statement at a time from ``source``."""
        return self.run(Parser(source))

    def close(self):
        self.env.teardown()
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    ###########################################################################
    # Statements
    ###########################################################################

    def execute(self, node: Stmt) -> None:
        if isinstance(node, Print):
            value = self.evaluate(node.expr)
            try:
                print(to_text(value), end='', file=self.out or sys.stdout)
            finally:
                release(value)
            return
        if isinstance(node, Compound):
            for stmt in node.statements:
                self.execute(stmt)
            return
        if isinstance(node, If):
            if self.condition(node.condition):
                self.execute(node.body)
            return
        if isinstance(node, While):
            while self.condition(node.condition):
                self.execute(node.body)
            return
        if isinstance(node, Assignment):
            if node.index is None:
                value = self.evaluate(node.expr)
                if self.debug_level >= 2:
                    self.debug(f"assign {node.name} = {value!r} ({type_name(value)})")
                self.env.set(node.name, value)
            else:
                self.store_element(node)
            return
        if isinstance(node, Push):
            seq = require_seq(self.evaluate(node.sequence))
            try:
                value = require_int(self.evaluate(node.value))
                seq.push(value)
                if self.debug_level >= 2:
                    self.debug(f"push {value} -> {seq!r}")
            finally:
                seq.release()
            return
        raise NotImplementedError(f"execute: unexpected node type {type(node)}")

    def condition(self, expr: Expr) -> bool:
        value = require_int(self.evaluate(expr))
        if self.debug_level >= 3:
            self.debug(f"condition {value}")
        return value != 0

    def store_element(self, node: Assignment) -> None:
        seq = require_seq(self.env.lookup(node.name)).grab()
        try:
            index = require_int(self.evaluate(node.index))
            seq.check_index(index)
            value = require_int(self.evaluate(node.expr))
            seq.set(index, value)
            if self.debug_level >= 2:
                self.debug(f"store {node.name}[{index}] = {value}")
        finally:
            seq.release()

    ###########################################################################
    # Expressions
    ###########################################################################

    def evaluate(self, node: Expr) -> Value:
        if isinstance(node, LiteralInt):
            return node.value
        if isinstance(node, Variable):
            value = self.env.lookup(node.name)
            if isinstance(value, Sequence):
                value.grab()
            return value
        if isinstance(node, SequenceInit):
            codes = []
            for element in node.elements:
                codes.append(require_int(self.evaluate(element)))
            return self.heap.allocate(codes)
        if isinstance(node, Len):
            seq = require_seq(self.evaluate(node.operand))
            count = seq.count
            seq.release()
            return count
        if isinstance(node, BinaryOp):
            if node.op in ('&&', '||'):
                return self.short_circuit(node)
            left = self.evaluate(node.left)
            try:
                right = self.evaluate(node.right)
                try:
                    return self.apply_binary_op(node.op, left, right)
                finally:
                    release(right)
            finally:
                release(left)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    def short_circuit(self, node: BinaryOp) -> int:
        left = require_int(self.evaluate(node.left))
        if node.op == '&&' and left == 0:
            return left
        if node.op == '||' and left != 0:
            return left
        return require_int(self.evaluate(node.right))

    def apply_binary_op(self, op: str, a: Value, b: Value) -> int:
        """Combine two evaluated operands. Callers keep ownership of both."""
        if op == '==':
            if isinstance(a, int) and isinstance(b, int):
                return 1 if a == b else 0
            if isinstance(a, Sequence) and isinstance(b, Sequence):
                return 1 if a.items == b.items else 0
            # An int never equals a sequence.
            return 0
        if op == '<':
            if isinstance(a, int) and isinstance(b, int):
                return 1 if a < b else 0
            if isinstance(a, Sequence) and isinstance(b, Sequence):
                return 1 if sequence_less(a, b) else 0
            raise TypeMismatch()
        if op == '[':
            if not isinstance(a, Sequence) or not isinstance(b, int):
                raise TypeMismatch()
            return a.get(b)
        if not isinstance(a, int) or not isinstance(b, int):
            raise TypeMismatch()
        if op == '+':
            return a + b
        if op == '-':
            return a - b
        if op == '*':
            return a * b
        if op == '/':
            if b == 0:
                raise DivideByZero()
            return truncate_div(a, b)
        raise NotImplementedError(f"unknown operator {op}")


def run_program(source: Union[str, TextIO], debug_level: int = 0) -> Interpreter:
    """Convenience function to parse and run a program from a string or stream."""
    interpreter = Interpreter(debug_level=debug_level)
    interpreter.run_source(source)
    return interpreter


def run_file(file_path: str, debug_level: int = 0) -> Interpreter:
    """Run a seqlang source file, returning the interpreter instance."""
    with open(file_path, 'r', encoding='utf-8') as f:
        return run_program(f, debug_level=debug_level)
