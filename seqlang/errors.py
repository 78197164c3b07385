from typing import Optional


class SeqLangError(Exception):
    """Base class for every fatal error raised while running a program."""
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ParseError(SeqLangError):
    """Raised when the source text is not a legal program."""
    def __init__(self, line: int, detail: str = 'syntax error'):
        super().__init__(f"line {line}: {detail}")
        self.line = line
        self.detail = detail


class RuntimeFault(SeqLangError):
    """Base class for errors detected while evaluating a program."""
    default_message = 'runtime fault'

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)


class TypeMismatch(RuntimeFault):
    default_message = 'Type mismatch'


class DivideByZero(RuntimeFault):
    default_message = 'Divide by zero'


class IndexOutOfBounds(RuntimeFault):
    default_message = 'Index out of bounds'


class HeapError(RuntimeError):
    """Internal reference-count violation (release past zero, use after free)."""
