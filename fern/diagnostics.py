"""Source-annotated error reports.

Positions are computed 0-based (line and column) and displayed 1-based.
A column counts characters from the start of its line, so the first
character of every line, including the first line of the file, is
column 0 internally and column 1 on display.
"""

from typing import Iterable, List, Tuple

from .ast import Span
from .errors import FernError, InterpError
from .types import StackFrame


def index_to_position(source: str, index: int) -> Tuple[int, int]:
    """Convert an index into `source` into a 0-based (line, column) pair."""
    if index < 0 or index > len(source):
        raise ValueError(f"index {index} is outside source of length {len(source)}")
    line = source.count('\n', 0, index)
    line_start = source.rfind('\n', 0, index) + 1
    return line, index - line_start


def position_label(source: str, index: int, name: str) -> str:
    line, col = index_to_position(source, index)
    return f"{name}:{line + 1}:{col + 1}"


def underline(source: str, span: Span) -> List[Tuple[int, str, int, int]]:
    """Return ``(line number, line text, blank width, caret width)`` for each line `span` touches."""
    start_line, start_col = index_to_position(source, span.start)
    end_line, end_col = index_to_position(source, span.end)
    lines = source.split('\n')
    if end_line > start_line and end_col == 0:
        # The span stops at a line break; the next line is not part of it.
        end_line -= 1
        end_col = len(lines[end_line])
    rows = []
    for i in range(start_line, end_line + 1):
        text = lines[i]
        if i == start_line and i == end_line:
            blank, width = start_col, max(1, end_col - start_col)
        elif i == start_line:
            blank, width = start_col, len(text) - start_col
        elif i == end_line:
            blank, width = 0, end_col
        else:
            blank, width = 0, len(text)
        rows.append((i, text, blank, width))
    return rows


def render_error(message: str, span: Span, source: str, name: str) -> str:
    out = [f"error in {name}: {message}"]
    for i, text, blank, width in underline(source, span):
        out.append(f"{i + 1:4} | {text}")
        out.append(f"{'':4} | {' ' * blank}{'^' * width}")
    return '\n'.join(out)


def render_traceback(stack: Iterable[StackFrame], source: str, name: str) -> str:
    """Render call frames outermost first, skipping the synthetic root frame."""
    out = []
    frames = list(stack)[1:]
    for index, frame in enumerate(frames):
        out.append(f"#{index}: {position_label(source, frame.span.start, name)}")
        out.append(f"\t{source[frame.span.start:frame.span.end]}")
    return '\n'.join(out)


def render_exception(error: FernError, source: str, name: str) -> str:
    report = render_error(error.message, error.span, source, name)
    if isinstance(error, InterpError) and len(error.stack) > 1:
        report += "\ncall stack:\n" + render_traceback(error.stack, source, name)
    return report
