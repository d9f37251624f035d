from __future__ import annotations

import re
import uuid
from typing import Dict, List, Tuple


# Applied in this order; a span already replaced by a token no longer matches later passes.
MARKUP_PATTERNS: Tuple[Tuple[str, re.Pattern[str]], ...] = (
    ("bold", re.compile(r"<b>(.*?)</b>")),
    ("italic", re.compile(r"<i>(.*?)</i>")),
    ("link", re.compile(r'<a href="(.*?)">(.*?)</a>')),
    ("interpolation", re.compile(r"\$\{(.*?)\}")),
)


def placeholder(token: str) -> str:
    """Delimited form of a token as it appears in text sent to a provider."""
    return "{{" + token + "}}"


def _mask_pattern(text: str, pattern: re.Pattern[str], placeholders: Dict[str, str]) -> str:
    def _repl(match: re.Match[str]) -> str:  # noqa: ANN001 - inline replacement
        token = uuid.uuid4().hex
        placeholders[token] = match.group(0)
        return placeholder(token)

    return pattern.sub(_repl, text)


def mask_markup(text: str) -> Tuple[str, Dict[str, str]]:
    """
    Replace bold, italic, link and ``${...}`` spans with opaque ``{{token}}`` placeholders.

    Returns the masked text and a token -> original fragment map. Text without
    markup comes back unchanged with an empty map.
    """
    placeholders: Dict[str, str] = {}
    masked = text
    for _kind, pattern in MARKUP_PATTERNS:
        masked = _mask_pattern(masked, pattern, placeholders)
    return masked, placeholders


def unmask_markup(text: str, placeholders: Dict[str, str]) -> str:
    """Put fragments back in place of the first occurrence of each token; missing tokens are skipped."""
    restored = text
    # Later passes may capture earlier tokens (a link around a bold span), so unwind newest first.
    for token, fragment in reversed(list(placeholders.items())):
        restored = restored.replace(placeholder(token), fragment, 1)
    return restored


def _nested_tokens(placeholders: Dict[str, str]) -> set[str]:
    fragments = list(placeholders.values())
    return {token for token in placeholders if any(placeholder(token) in frag for frag in fragments)}


def find_placeholder_issues(text: str, placeholders: Dict[str, str]) -> List[str]:
    """List tokens that are missing from, or repeated in, a provider's output."""
    issues: List[str] = []
    nested = _nested_tokens(placeholders)
    for token, fragment in placeholders.items():
        if token in nested:
            continue
        count = text.count(placeholder(token))
        if count == 0:
            issues.append(f"Placeholder for {fragment!r} missing from translation")
        elif count > 1:
            issues.append(f"Placeholder for {fragment!r} appears {count} times in translation")
    return issues
