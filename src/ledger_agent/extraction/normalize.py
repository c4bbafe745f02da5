"""Lenient normalization for JSON-like text that failed strict parsing.

A single forward pass repairs the mistakes agents make most often:

- prose after the final closing delimiter (and before the first opener)
- `//` and `/* */` comments outside strings
- single-quoted strings, converted only when the closing quote is followed
  by `:`, `,`, `}`, `]` or the end of the text
- bare identifier keys (`{name: 1}`)
- Python literals `True`, `False`, `None`
- trailing commas before `}` or `]`

The pass is never repeated on its own output; a candidate that still fails
after one pass is discarded.
"""

import json

from ledger_agent.extraction.candidates import SINGLE_QUOTE_CONTEXT, scan_delimited

_KEY_CONTEXT = frozenset("{,")
_VALUE_TERMINATORS = frozenset(":,}]")
_PY_LITERALS = {"True": "true", "False": "false", "None": "null"}


def normalize_lenient(text: str) -> str:
    """Return `text` with the bounded set of repairs applied once."""
    return _repair(strip_commentary(text))


def strip_commentary(text: str) -> str:
    """Drop prose before the first opener and after its closing delimiter.

    When the opener never closes cleanly, the text is cut after the last
    `}` or `]` instead. Text without any opener is returned stripped.
    """
    openers = [i for i in (text.find("{"), text.find("[")) if i >= 0]
    if not openers:
        return text.strip()
    first = min(openers)

    outcome, end = scan_delimited(text, first)
    if outcome == "closed":
        return text[first : end + 1]

    last = max(text.rfind("}"), text.rfind("]"))
    if last < first:
        return text[first:]
    return text[first : last + 1]


def _repair(text: str) -> str:
    out: list[str] = []
    prev = ""
    i = 0
    n = len(text)

    while i < n:
        char = text[i]

        if char == '"':
            end = _string_end(text, i, '"')
            if end is None:
                out.append(text[i:])
                break
            out.append(text[i:end])
            prev = '"'
            i = end
            continue

        if char == "'" and (prev == "" or prev in SINGLE_QUOTE_CONTEXT):
            end = _string_end(text, i, "'")
            if end is not None and _next_significant(text, end) in _VALUE_TERMINATORS:
                out.append(_requote(text[i + 1 : end - 1]))
                prev = '"'
                i = end
                continue

        if text.startswith("//", i):
            newline = text.find("\n", i)
            i = n if newline < 0 else newline
            continue

        if text.startswith("/*", i):
            close = text.find("*/", i + 2)
            i = n if close < 0 else close + 2
            continue

        if char.isalpha() or char in "_$":
            j = i + 1
            while j < n and (text[j].isalnum() or text[j] in "_$"):
                j += 1
            word = text[i:j]
            if prev in _KEY_CONTEXT and _next_significant(text, j) == ":":
                out.append(json.dumps(word))
                prev = '"'
            else:
                out.append(_PY_LITERALS.get(word, word))
                prev = word[-1]
            i = j
            continue

        if char == "," and _next_significant(text, i + 1) in ("}", "]"):
            i += 1
            continue

        out.append(char)
        if not char.isspace():
            prev = char
        i += 1

    return "".join(out)


def _string_end(text: str, start: int, quote: str) -> int | None:
    """Index one past the quote closing the string opened at `start`."""
    escaped = False
    for i in range(start + 1, len(text)):
        char = text[i]
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == quote:
            return i + 1
    return None


def _next_significant(text: str, pos: int) -> str:
    """First non-whitespace character at or after `pos`, or `,` at the end.

    End of text counts as a value terminator so a bare top-level string
    still converts.
    """
    for i in range(pos, len(text)):
        if not text[i].isspace():
            return text[i]
    return ","


def _requote(content: str) -> str:
    """Render the body of a single-quoted string as a JSON string literal."""
    out = ['"']
    escaped = False
    for char in content:
        if escaped:
            out.append("'" if char == "'" else "\\" + char)
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == '"':
            out.append('\\"')
        else:
            out.append(char)
    out.append('"')
    return "".join(out)
