"""Candidate discovery for JSON values embedded in agent replies.

Two scanners are provided:

- `find_fenced_blocks`: bodies of triple-backtick code fences, in order of
  appearance, whatever their info string (`json`, `JSON`, none).
- `find_balanced_candidates`: substrings that open with `{` or `[` and end at
  the matching closer, tracking nesting while skipping over quoted strings.

Both return `ExtractionCandidate` tuples ordered by start offset.
"""

import re
from typing import Literal

from ledger_agent.core.types import ExtractionCandidate

ScanOutcome = Literal["closed", "mismatched", "unterminated"]

_FENCE = re.compile(r"```[ \t]*(?P<lang>[\w.+-]*)[ \t]*(?P<body>.*?)```", re.DOTALL)

_CLOSER_FOR = {"{": "}", "[": "]"}
_CLOSERS = frozenset("}]")
# A single quote opens a string only where a JSON value or key may start.
SINGLE_QUOTE_CONTEXT = frozenset("{[,:")
_BARE_WORD = re.compile(r"[A-Za-z_$][\w$]*")
_LITERALS = frozenset({"true", "false", "null", "True", "False", "None"})


def find_fenced_blocks(text: str) -> tuple[ExtractionCandidate, ...]:
    """Return the non-empty bodies of closed code fences in `text`.

    An unclosed fence (a reply cut mid-stream) yields nothing; the balanced
    scan still sees its content.
    """
    blocks = []
    for match in _FENCE.finditer(text):
        body = match.group("body")
        stripped = body.strip()
        if not stripped:
            continue
        start = match.start("body") + (len(body) - len(body.lstrip()))
        blocks.append(
            ExtractionCandidate(
                text=stripped, start=start, end=start + len(stripped), phase="fenced"
            )
        )
    return tuple(blocks)


def scan_delimited(text: str, start: int) -> tuple[ScanOutcome, int]:
    """Scan from the opener at `text[start]` to its matching closer.

    Quoted strings are skipped, honoring backslash escapes, so delimiters
    inside them do not affect depth. Double quotes always open a string;
    single quotes only after `{`, `[`, `,` or `:`, so apostrophes in stray
    prose do not swallow the rest of the text.

    Returns:
        `("closed", i)` with `i` the index of the matching closer,
        `("mismatched", i)` with `i` the index of a wrong closer, or
        `("unterminated", len(text))` when the text ends first.
    """
    stack = [_CLOSER_FOR[text[start]]]
    quote: str | None = None
    escaped = False
    prev = text[start]

    for i in range(start + 1, len(text)):
        char = text[i]
        if quote is not None:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == quote:
                quote = None
                prev = char
            continue

        if char == '"' or (char == "'" and prev in SINGLE_QUOTE_CONTEXT):
            quote = char
        elif char in _CLOSER_FOR:
            stack.append(_CLOSER_FOR[char])
        elif char in _CLOSERS:
            if char != stack.pop():
                return "mismatched", i
            if not stack:
                return "closed", i
        if not char.isspace():
            prev = char

    return "unterminated", len(text)


def find_balanced_candidates(text: str) -> tuple[ExtractionCandidate, ...]:
    """Return balanced `{...}` / `[...]` substrings, earliest first.

    One stack-based pass pairs every opener with its closer, so each
    character is visited once. A wrong closer fails every opener still open
    at that point and the pass carries on with an empty stack. Only the
    outermost balanced spans are returned, so nested values never compete
    with the value that contains them.

    An opener that never closes is skipped when it reads like prose (an
    emoticon such as `:-[`, or `{see below`). When it reads like the start
    of a JSON value the reply was cut mid-structure, and nothing after it
    is returned, since its inner pieces would be a partial result.
    """
    spans: list[tuple[int, int]] = []
    stack: list[tuple[int, str]] = []
    quote: str | None = None
    escaped = False
    prev = ""

    for i, char in enumerate(text):
        if quote is not None:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == quote:
                quote = None
                prev = char
            continue

        if not stack:
            if char in _CLOSER_FOR:
                stack.append((i, _CLOSER_FOR[char]))
                prev = char
            continue

        if char == '"' or (char == "'" and prev in SINGLE_QUOTE_CONTEXT):
            quote = char
        elif char in _CLOSER_FOR:
            stack.append((i, _CLOSER_FOR[char]))
        elif char in _CLOSERS:
            start, expected = stack.pop()
            if char == expected:
                spans.append((start, i))
            else:
                stack.clear()
        if not char.isspace():
            prev = char

    cutoff = next(
        (start for start, _ in stack if _opens_json_value(text, start)), len(text)
    )

    candidates = []
    pos = 0
    for start, end in sorted(spans):
        if start < pos or start > cutoff:
            continue
        candidates.append(
            ExtractionCandidate(
                text=text[start : end + 1], start=start, end=end + 1, phase="balanced"
            )
        )
        pos = end + 1

    return tuple(candidates)


def _opens_json_value(text: str, start: int) -> bool:
    """Whether the unclosed opener at `start` begins what reads as JSON.

    An object must continue with a quoted or bare key; an array with a
    string, a nested container, a number or a literal.
    """
    i = _skip_space(text, start + 1)
    if i == len(text):
        return True
    char = text[i]
    if char in "\"'":
        return True

    word = _BARE_WORD.match(text, i)
    if text[start] == "{":
        if word is None:
            return False
        colon = _skip_space(text, word.end())
        return text[colon : colon + 1] == ":"
    if char in "{[-" or char.isdigit():
        return True
    return word is not None and word.group() in _LITERALS


def _skip_space(text: str, pos: int) -> int:
    while pos < len(text) and text[pos].isspace():
        pos += 1
    return pos
