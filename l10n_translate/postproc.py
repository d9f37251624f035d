from __future__ import annotations

import re
from collections import Counter
from typing import List, Tuple

from bs4 import BeautifulSoup


_INTERPOLATION_RE = re.compile(r"\$\{.*?\}")


def compare_markup_structure(
    source_text: str,
    translated_text: str,
) -> Tuple[bool, List[str]]:
    """
    Compare inline tag sequence + attribute values of two strings.
    Returns: (ok, issues)
    """
    issues: List[str] = []

    o = BeautifulSoup(source_text, "html.parser")
    t = BeautifulSoup(translated_text, "html.parser")

    o_tags = o.find_all(True)
    t_tags = t.find_all(True)

    if len(o_tags) != len(t_tags):
        issues.append(f"Different number of tags: src={len(o_tags)} vs trans={len(t_tags)}")
        return False, issues

    for i, (ot, tt) in enumerate(zip(o_tags, t_tags)):
        if ot.name != tt.name:
            issues.append(f"Tag mismatch at index {i}: src=<{ot.name}> vs trans=<{tt.name}>")
            continue

        o_attrs = dict(ot.attrs)
        t_attrs = dict(tt.attrs)

        if set(o_attrs) != set(t_attrs):
            issues.append(
                f"Attribute keys differ at tag {i} <{ot.name}>: "
                f"src={sorted(o_attrs)} vs trans={sorted(t_attrs)}"
            )
            continue

        for k in o_attrs:
            if o_attrs[k] != t_attrs[k]:
                issues.append(
                    f"Attribute value changed at tag {i} <{ot.name}> attr='{k}': src={o_attrs[k]} vs trans={t_attrs[k]}"
                )

    return not issues, issues


def interpolations_check(source_text: str, translated_text: str) -> List[str]:
    """Warn when the ``${...}`` expressions of a translation differ from the source."""
    warnings: List[str] = []
    src = Counter(_INTERPOLATION_RE.findall(source_text))
    tr = Counter(_INTERPOLATION_RE.findall(translated_text))
    if src != tr:
        warnings.append(f"Interpolations changed: src={dict(src)} vs trans={dict(tr)}")
    return warnings
