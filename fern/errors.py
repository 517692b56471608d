from typing import Tuple, TYPE_CHECKING

from fern.ast import Span

if TYPE_CHECKING:
    from fern.environment import Environment
    from fern.types import StackFrame


class FernError(Exception):
    """Base class for every error reported against a Fern source span."""
    def __init__(self, message: str, span: Span):
        super().__init__(message)
        self.message = message
        self.span = span


class LexError(FernError):
    """Raised when the source contains a character no token starts with."""


class ParseError(FernError):
    """Raised on the first malformed token sequence; the parse is abandoned."""


class InterpError(FernError):
    """Runtime error carrying the environment and call stack at the failure point."""
    def __init__(self, message: str, span: Span, env: 'Environment', stack: Tuple['StackFrame', ...]):
        super().__init__(message, span)
        self.env = env
        self.stack = stack
