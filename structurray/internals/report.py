from __future__ import annotations
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Any

from lark import Token

class C:
    """ANSI color/style escape codes."""
    RESET = "\x1b[0m"
    BOLD  = "\x1b[1m"
    DIM   = "\x1b[2m"
    RED   = "\x1b[31m"
    YELLOW = "\x1b[33m"
    CYAN  = "\x1b[36m"
    GRAY  = "\x1b[90m"

@dataclass
class Span:
    line: int
    col: int
    end_line: int
    end_col: int

@dataclass
class Diagnostic:
    kind: str
    code: str
    message: str
    span: Optional[Span] = None
    filename: Optional[str] = None

def span_of(t: Any) -> Optional[Span]:
    m = getattr(t, "meta", None)
    if m is not None and not getattr(m, "empty", True):
        return Span(m.line, m.column, m.end_line, m.end_column)
    if isinstance(t, Token):
        line = getattr(t, "line", None)
        col = getattr(t, "column", None)
        end_line = getattr(t, "end_line", None)
        end_col = getattr(t, "end_column", None)
        if line is not None and col is not None:
            return Span(line, col, end_line or line, end_col or col)
    return None

def span_at(source: str, start: int, end: Optional[int] = None) -> Span:
    """Span covering source[start:end], with 1-based lines and columns."""
    if end is None:
        end = start + 1

    def _locate(pos: int) -> tuple[int, int]:
        line = source.count("\n", 0, pos) + 1
        line_start = source.rfind("\n", 0, pos) + 1
        return line, pos - line_start + 1

    line, col = _locate(start)
    end_line, end_col = _locate(end)
    return Span(line, col, end_line, end_col)


class Reporter:
    def __init__(self, source: Optional[str] = None, filename: str = "<input>") -> None:
        self.source = source
        self.filename = filename
        self.items: List[Diagnostic] = []

    def error(self, code: str, msg: str, span: Optional[Span]):
        self.items.append(Diagnostic("error", code, msg, span, filename=self.filename))

    def warn(self, code: str, msg: str, span: Optional[Span]):
        self.items.append(Diagnostic("warning", code, msg, span, filename=self.filename))

    @property
    def has_errors(self) -> bool:
        return any(d.kind == "error" for d in self.items)

    @property
    def has_warnings(self) -> bool:
        return any(d.kind == "warning" for d in self.items)

    def codes(self) -> List[str]:
        return [d.code for d in self.items]

    def _display_name(self, filename: str) -> str:
        if filename.startswith("<"):
            return filename
        try:
            rel_path = Path(filename).resolve().relative_to(Path.cwd())
            return f"./{rel_path}"
        except ValueError:
            # Outside the working directory: basename only
            return Path(filename).name

    def format(self, use_color: bool = True, use_unicode: bool = True) -> str:
        """Render all diagnostics.

        use_color   → ANSI colorize location/kind/guide/markers
        use_unicode → use │ / ╰ / ╯ and a separate caret line above the guide
        """
        out: List[str] = []
        src_lines = self.source.splitlines() if self.source else None

        for d in self.items:
            filename = self._display_name(d.filename or self.filename)
            loc = f"{filename}:{d.span.line}:{d.span.col}" if d.span else filename

            # Ensure message ends with period
            message = d.message if d.message.endswith('.') else f"{d.message}."

            if use_color:
                kind = f"{C.BOLD}{C.RED}error{C.RESET}" if d.kind == "error" else f"{C.BOLD}{C.YELLOW}warning{C.RESET}"
                head = f"{C.CYAN}{loc}{C.RESET}: {kind} [{C.DIM}{d.code}{C.RESET}]: {message}"
            else:
                head = f"{loc}: {d.kind} [{d.code}]: {message}"

            if not d.span:
                out.append(head)
                continue

            line_idx = d.span.line - 1
            if src_lines is not None and 0 <= line_idx < len(src_lines):
                line_text = src_lines[line_idx]
            else:
                line_text = ""

            start = max(1, d.span.col)
            error_color = C.RED if d.kind == "error" else C.YELLOW

            def gray(s: str) -> str:
                return f"{C.GRAY}{s}{C.RESET}" if use_color else s

            if use_unicode:
                out.append(f"{gray('  ╭──┤ ')}{head}")
                out.append(f"{gray('  │')} {line_text}")
                caret = " " * (start - 1) + "┯"
                if use_color:
                    caret = f"{error_color}{caret}{C.RESET}"
                out.append(f"{gray('  │')} {caret}")
                guide = gray("─" * start)
                corner = f"{error_color}╯{C.RESET}" if use_color else "╯"
                out.append(f"{gray('  ╰')}{guide}{corner}")
            else:
                # ASCII fallback: header on top, then source and caret
                out.append(head)
                out.append(f"  | {line_text}")
                out.append(f"  ` {' ' * (start - 1)}^")

        return "\n".join(out)

    def print(self, stream=None, use_color: Optional[bool] = None, use_unicode: Optional[bool] = None) -> None:
        """Print diagnostics to `stream` (default: sys.stderr).

        Color is auto-enabled for TTY unless NO_COLOR or TERM=dumb.
        Unicode prefixes (│ / ╰) are auto-enabled for TTY unless NO_UNICODE or TERM=dumb.
        """
        stream = stream or sys.stderr
        is_tty = getattr(stream, "isatty", lambda: False)()
        dumb = os.getenv("TERM") == "dumb"

        if use_color is None:
            use_color = bool(is_tty and os.getenv("NO_COLOR") is None and not dumb)

        if use_unicode is None:
            use_unicode = bool(is_tty and os.getenv("NO_UNICODE") is None and not dumb)

        text = self.format(use_color=use_color, use_unicode=use_unicode)
        if text:
            print(text, file=stream)
