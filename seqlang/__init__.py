# seqlang language package
# This package provides a tokenizer, parser and interpreter for seqlang.
from .errors import SeqLangError, ParseError, TypeMismatch, DivideByZero, IndexOutOfBounds
from .interpreter import run_program, run_file, Interpreter
from .parser import parse_program

__all__ = [
    'run_program',
    'run_file',
    'parse_program',
    'Interpreter',
    'SeqLangError',
    'ParseError',
    'TypeMismatch',
    'DivideByZero',
    'IndexOutOfBounds',
]
