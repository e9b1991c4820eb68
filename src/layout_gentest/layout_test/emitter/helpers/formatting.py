import math

from layout_gentest.layout_test.errors import ScopeStateError

# 2**53, the largest range where every integer is an exact double
MAX_EXACT_INTEGER = 2 ** 53


class IndentState:
    """Nesting depth for emitted lines.

    Pushes and pops are strictly paired: popping at depth zero raises instead of
    silently underflowing.
    """

    def __init__(self, unit: str = "  "):
        self.unit = unit
        self.depth = 0

    def push(self) -> None:
        self.depth += 1

    def pop(self) -> None:
        if self.depth == 0:
            raise ScopeStateError("unbalanced scope: indentation popped below zero")
        self.depth -= 1

    @property
    def prefix(self) -> str:
        return self.unit * self.depth


class LineBuffer:
    """Append-only list of output lines."""

    def __init__(self):
        self._lines: list[str] = []

    def append(self, line: str) -> None:
        self._lines.append(line)

    def __len__(self) -> int:
        return len(self._lines)

    @property
    def lines(self) -> tuple[str, ...]:
        return tuple(self._lines)

    def text(self) -> str:
        return "\n".join(self._lines)


def indent_line(line: str, prefix: str) -> str:
    # blank lines carry no indentation
    return f"{prefix}{line}" if line else ""


def split_block(block: str | list[str]) -> list[str]:
    """Normalise a rendered block or list of lines into individual lines."""
    if isinstance(block, str):
        # a YAML literal block ends with a newline that is not an extra line
        return block[:-1].split("\n") if block.endswith("\n") else block.split("\n")
    lines: list[str] = []
    for item in block:
        lines.extend(split_block(item))
    return lines


def substitute_placeholder(text: str, placeholder: str, value: str) -> str:
    """Replace every occurrence of placeholder, not just the first."""
    if not placeholder:
        return text
    return text.replace(placeholder, value)


def format_number(value: float) -> str:
    """Render 100.0 as "100" and 33.5 as "33.5".

    Integral values outside the exact double range keep float notation so
    they never turn into an overflowing integer literal.
    """
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"cannot render non-finite number {number!r}")
    if number.is_integer() and abs(number) < MAX_EXACT_INTEGER:
        return str(int(number))
    return repr(number)


def cxx_string_literal(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'
