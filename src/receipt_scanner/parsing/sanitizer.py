"""Heuristic repair of almost-JSON produced by language models.

The repairs run in a fixed order: escape handling must come before the
blanket backslash removal, and quoting must come before comma repair
because the separator patterns depend on where the quotes are.

Known failure modes of the quoting heuristics:

- A bare value containing a colon (``time: 10:30``) is read as a key.
- An apostrophe inside a single-quoted value (``'McDonald's'``) ends the
  value early.
- Apostrophes inside double-quoted strings are replaced by spaces.
- Two array strings with no comma between them (``["A" "B"]``) are
  merged into one.
"""

from __future__ import annotations

import json
import logging
import re

logger = logging.getLogger(__name__)

FALLBACK_JSON = (
    '{"vendorName":"Unknown Vendor","transactionDate":"2023-01-01",'
    '"totalAmount":0,"items":[]}'
)

_DOUBLE_QUOTED = r'"(?:[^"\\]|\\.)*"'
_SINGLE_QUOTED = r"'[^'\n]*'"

_VALID_ESCAPE = re.compile(r'\\["\\/bfnrt]')
_PLACEHOLDER = "__ESCAPE_{}__"

_KEY_TOKENS = re.compile(
    "(?P<dq>" + _DOUBLE_QUOTED + ")"
    "|(?P<sq>" + _SINGLE_QUOTED + r")(?P<sq_colon>\s*:)?"
    r"|(?P<bare>[A-Za-z0-9_]+)\s*:"
)
_VALUE_TOKENS = re.compile(
    "(?P<dq>" + _DOUBLE_QUOTED + ")"
    "|(?P<sq>" + _SINGLE_QUOTED + ")"
    r"|:\s*(?P<bare>[A-Za-z][A-Za-z0-9_\s]*[A-Za-z0-9_])(?=\s*[,}])"
)
_STRING_LITERAL = re.compile(_DOUBLE_QUOTED)
_KEY_STRING = re.compile(_DOUBLE_QUOTED + r"\s*:")
_SEPARATOR_TOKENS = re.compile(_DOUBLE_QUOTED + r'|[{}\[\]]|\s+|[^"{}\[\]\s]+|"')

_JSON_LITERALS = frozenset({"true", "false", "null"})

# (previous, next) token kinds that need a comma between them
_MISSING_COMMA = frozenset(
    {
        ("}", "{"),
        ("]", "["),
        ('"', "["),
        ("]", '"'),
        ("}", "["),
        ("]", "{"),
    }
)
_STRING_TERMINATORS = frozenset(",:}]")
_NEXT_NON_BLANK = re.compile(r"\s*(\S)?")


def sanitize(
    text: str,
    log: logging.Logger | None = None,
    preview_chars: int = 100,
) -> str:
    """Repair common syntax defects so ``text`` has a chance to parse.

    Never raises; an internal failure returns :data:`FALLBACK_JSON`.

    Args:
        text: Candidate JSON text located in the model output
        log: Logger for diagnostics (defaults to the module logger)
        preview_chars: Characters of long texts shown in debug logs

    Returns:
        The repaired text (not guaranteed to be valid JSON)
    """
    log = log or logger
    try:
        _log_preview(log, "Original JSON", text, preview_chars)

        cleaned = text.strip()
        cleaned = _strip_stray_backslashes(cleaned)
        cleaned = _quote_keys(cleaned)
        cleaned = _quote_values(cleaned)
        cleaned = _remove_trailing_commas(cleaned)
        cleaned = _insert_missing_commas(cleaned)
        cleaned = _collapse_line_breaks(cleaned)

        if not cleaned.startswith("{"):
            cleaned = "{" + cleaned
        if not cleaned.endswith("}"):
            cleaned = cleaned + "}"

        cleaned = cleaned.replace('\\\\"', '\\"')
        cleaned = neutralize_nested_quotes(cleaned)

        _log_preview(log, "Sanitized JSON", cleaned, preview_chars)
        try:
            json.loads(cleaned)
            log.debug("Sanitized JSON is valid standard JSON")
        except ValueError as e:
            log.debug("Sanitized JSON is not valid standard JSON: %s", e)

        return cleaned
    except Exception as e:
        log.error("Error during JSON sanitization: %s", e)
        return FALLBACK_JSON


def neutralize_nested_quotes(text: str) -> str:
    """Blank out quote characters that would end a string too early.

    Walks the text with two flags, ``in_string`` and ``pending_escape``.
    Inside a double-quoted string an unescaped apostrophe becomes a space,
    and so does a double quote unless the next non-blank character is one
    that may follow a string (``, : } ]``) or the text ends there.
    """
    in_string = False
    pending_escape = False
    result: list[str] = []

    for index, char in enumerate(text):
        if pending_escape:
            result.append(char)
            pending_escape = False
            continue

        if char == "\\":
            result.append(char)
            pending_escape = True
            continue

        if char == '"':
            if not in_string:
                in_string = True
            elif _closes_string(text, index + 1):
                in_string = False
            else:
                result.append(" ")
                continue
            result.append(char)
            continue

        if in_string and char == "'":
            result.append(" ")
        else:
            result.append(char)

    return "".join(result)


def _closes_string(text: str, start: int) -> bool:
    match = _NEXT_NON_BLANK.match(text, start)
    following = match.group(1) if match else None
    return following is None or following in _STRING_TERMINATORS


def _strip_stray_backslashes(text: str) -> str:
    """Drop backslashes that do not start a valid JSON escape."""
    escapes: list[str] = []

    def stash(match: re.Match[str]) -> str:
        escapes.append(match.group(0))
        return _PLACEHOLDER.format(len(escapes) - 1)

    protected = _VALID_ESCAPE.sub(stash, text).replace("\\", "")
    for index, original in enumerate(escapes):
        protected = protected.replace(_PLACEHOLDER.format(index), original, 1)
    return protected


def _to_double_quoted(single_quoted: str) -> str:
    inner = single_quoted[1:-1].replace('"', '\\"')
    return f'"{inner}"'


def _quote_keys(text: str) -> str:
    """Double-quote bare and single-quoted keys."""

    def repl(match: re.Match[str]) -> str:
        if match.group("dq") is not None:
            return match.group(0)
        if match.group("sq") is not None:
            if match.group("sq_colon") is None:
                return match.group(0)
            return _to_double_quoted(match.group("sq")) + ":"
        return f'"{match.group("bare")}":'

    return _KEY_TOKENS.sub(repl, text)


def _quote_values(text: str) -> str:
    """Double-quote single-quoted strings and bare word values."""

    def repl(match: re.Match[str]) -> str:
        if match.group("dq") is not None:
            return match.group(0)
        if match.group("sq") is not None:
            return _to_double_quoted(match.group("sq"))
        word = match.group("bare")
        if word in _JSON_LITERALS:
            return match.group(0)
        return f': "{word}"'

    return _VALUE_TOKENS.sub(repl, text)


def _remove_trailing_commas(text: str) -> str:
    def strip(segment: str) -> str:
        segment = re.sub(r",\s*}", "}", segment)
        return re.sub(r",\s*\]", "]", segment)

    parts: list[str] = []
    last = 0
    for match in _STRING_LITERAL.finditer(text):
        parts.append(strip(text[last : match.start()]))
        parts.append(match.group(0))
        last = match.end()
    parts.append(strip(text[last:]))
    return "".join(parts)


def _insert_missing_commas(text: str) -> str:
    """Add commas between adjacent values such as ``}{`` or ``]"``.

    A string directly followed by a ``"key":`` string also gets one.
    """
    result: list[str] = []
    pending_space = ""
    previous = ""

    for match in _SEPARATOR_TOKENS.finditer(text):
        token = match.group(0)
        if token.isspace():
            pending_space += token
            continue

        kind = '"' if token.startswith('"') else token
        if (previous, kind) in _MISSING_COMMA or (
            previous == kind == '"' and _KEY_STRING.match(text, match.start())
        ):
            result.append(", ")
        else:
            result.append(pending_space)
        pending_space = ""
        result.append(token)
        previous = kind

    result.append(pending_space)
    return "".join(result)


def _collapse_line_breaks(text: str) -> str:
    text = re.sub(r'"\s*\n\s*"', " ", text)
    return re.sub(r"\r?\n", " ", text)


def _log_preview(log: logging.Logger, label: str, text: str, preview_chars: int) -> None:
    log.debug("%s length: %d", label, len(text))
    if len(text) > 5 * preview_chars:
        log.debug("%s start: %s...", label, text[:preview_chars])
        log.debug("%s end: ...%s", label, text[-preview_chars:] if preview_chars else "")
    else:
        log.debug("%s: %s", label, text)
