"""Locate the data block inside free-form model output."""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL)
_BRACE_SPAN = re.compile(r"\{.*\}", re.DOTALL)


def locate_candidate(text: str, log: logging.Logger | None = None) -> str | None:
    """Return the substring of ``text`` most likely to hold the JSON payload.

    A fenced code block wins over a bare ``{...}`` span; the brace span runs
    from the first ``{`` to the last ``}``. Returns None when neither is
    present.
    """
    log = log or logger

    fenced = _FENCED_BLOCK.search(text)
    if fenced and fenced.group(1):
        log.info("Found JSON in code block")
        return fenced.group(1)

    braces = _BRACE_SPAN.search(text)
    if braces:
        log.info("Found JSON-like structure with curly braces")
        return braces.group(0)

    log.warning("No JSON structure found in the model response")
    return None
