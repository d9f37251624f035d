from __future__ import annotations

from typing import Any, Dict, List

from .document import format_path
from .postproc import compare_markup_structure, interpolations_check
from .translator import LeafResult


def run_markup_checks(results: List[LeafResult]) -> List[Dict[str, Any]]:
    """
    One QA row per leaf:
      - qa_ok_structure
      - qa_structure_issues
      - qa_interpolation_warnings
    """
    rows = []
    for res in results:
        ok, issues = compare_markup_structure(res.source, res.text)
        rows.append(
            {
                "path": format_path(res.path),
                "status": res.status,
                "source": res.source,
                "translated": res.text,
                "error": str(res.error) if res.error else "",
                "qa_ok_structure": ok,
                "qa_structure_issues": "; ".join(issues),
                "qa_interpolation_warnings": "; ".join(interpolations_check(res.source, res.text)),
            }
        )
    return rows
