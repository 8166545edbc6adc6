"""Positional placeholder substitution for fragment text.

Syntax:
- ``{N}``: replaced by the N-th positional argument (0-9)
- ``{{`` / ``}}``: literal ``{`` / ``}``

Anything else involving a brace is an error. Substitution is a single
left-to-right scan; substituted values are never re-scanned.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from prompt_assembler.errors import (
    EmptyPlaceholderError,
    MalformedPlaceholderError,
    MissingArgumentError,
    PlaceholderIndexError,
    UnmatchedBraceError,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

MAX_PLACEHOLDER_INDEX = 9


def substitute_placeholders(text: str, args: Sequence[str]) -> str:
    """Expand ``{N}`` references in ``text`` against ``args``.

    Raises:
        EmptyPlaceholderError: ``{}``.
        MalformedPlaceholderError: ``{`` not followed by digits or ``{``, or
            a digit run not closed by ``}``.
        PlaceholderIndexError: An index above 9.
        UnmatchedBraceError: A ``}`` that is not part of ``}}``.
        MissingArgumentError: An index with no corresponding argument.
    """
    out: list[str] = []
    n = len(text)
    i = 0
    while i < n:
        ch = text[i]
        if ch == "{":
            if i + 1 < n and text[i + 1] == "{":
                out.append("{")
                i += 2
                continue
            start = i + 1
            end = start
            while end < n and text[end].isascii() and text[end].isdigit():
                end += 1
            digits = text[start:end]
            if not digits:
                if end < n and text[end] == "}":
                    raise EmptyPlaceholderError(
                        "empty placeholder braces are not allowed",
                        hint="Use {{}} for literal braces.",
                    )
                if end >= n:
                    raise MalformedPlaceholderError(
                        "unterminated placeholder at end of text"
                    )
                raise MalformedPlaceholderError(
                    f"malformed placeholder at offset {i}: "
                    "expected a digit or '{' after '{'",
                    hint="Use {{ for a literal brace.",
                )
            if end >= n or text[end] != "}":
                raise MalformedPlaceholderError(
                    f"unterminated placeholder '{{{digits}'"
                )
            index = int(digits)
            if index > MAX_PLACEHOLDER_INDEX:
                raise PlaceholderIndexError(index)
            if index >= len(args):
                raise MissingArgumentError(index, len(args))
            out.append(args[index])
            i = end + 1
        elif ch == "}":
            if i + 1 < n and text[i + 1] == "}":
                out.append("}")
                i += 2
                continue
            raise UnmatchedBraceError(
                f"unmatched closing brace '}}' at offset {i}",
                hint="Use }} for a literal brace.",
            )
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def ensure_trailing_newline(text: str) -> str:
    """Normalize ``text`` to end with exactly one line break."""
    return text.rstrip("\r\n") + "\n"
