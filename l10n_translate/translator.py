from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .document import LeafPath, MappingNode, TranslationLeaf, format_path, iter_leaves, parse_document, render_document
from .errors import (
    ConfigurationError,
    InputFormatError,
    LeafTranslationError,
    PlaceholderMismatchError,
    TranslationError,
)
from .markup import find_placeholder_issues, mask_markup, unmask_markup
from .providers import BaseTranslator
from .utils import sha1_text


STATUS_TRANSLATED = "translated"
STATUS_SKIPPED = "skipped"
STATUS_FAILED = "failed"


class AuditTrail:
    """Lightweight audit collector for per-leaf decisions of a run."""

    def __init__(self) -> None:
        self.records: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    def record(self, kind: str, payload: Dict[str, Any]) -> None:
        entry = {"kind": kind, **payload}
        with self._lock:
            self.records.append(entry)

    def as_list(self) -> List[Dict[str, Any]]:
        with self._lock:
            return list(self.records)


class RateLimiter:
    """Simple thread-safe rate limiter (requests per minute)."""

    def __init__(self, requests_per_minute: Optional[int] = None):
        self.requests_per_minute = requests_per_minute or 0
        self.interval = 60.0 / self.requests_per_minute if self.requests_per_minute > 0 else 0.0
        self._lock = threading.Lock()
        self._last_ts = 0.0

    def wait(self) -> None:
        if self.interval <= 0:
            return
        with self._lock:
            now = time.monotonic()
            delta = now - self._last_ts
            if delta < self.interval:
                time.sleep(self.interval - delta)
            self._last_ts = time.monotonic()


@dataclass
class LeafResult:
    path: LeafPath
    source: str
    text: str
    status: str
    error: Optional[LeafTranslationError] = None

    @property
    def ok(self) -> bool:
        return self.status != STATUS_FAILED


@dataclass
class TranslationReport:
    document: Any
    results: List[LeafResult] = field(default_factory=list)

    def _count(self, status: str) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def translated(self) -> int:
        return self._count(STATUS_TRANSLATED)

    @property
    def skipped(self) -> int:
        return self._count(STATUS_SKIPPED)

    @property
    def failed(self) -> int:
        return self._count(STATUS_FAILED)

    @property
    def failures(self) -> List[LeafResult]:
        return [r for r in self.results if r.status == STATUS_FAILED]


def translate_leaf(
    leaf: TranslationLeaf,
    target_language: str,
    translator: BaseTranslator,
    strict_placeholders: bool = False,
    max_retries: int = 0,
    retry_backoff: float = 1.0,
    rate_limiter: Optional[RateLimiter] = None,
    audit: Optional[AuditTrail] = None,
    logger: Optional[logging.Logger] = None,
) -> LeafResult:
    """
    Mask, translate and unmask one ``"translated"`` string.

    Provider failures are caught and returned as a failed result that keeps the
    input text; only ``ConfigurationError`` escapes.
    """

    masked, placeholders = mask_markup(leaf.text)
    if not masked:
        result = LeafResult(leaf.path, leaf.text, leaf.text, STATUS_SKIPPED)
        _audit_leaf(audit, result, masked, placeholders)
        return result

    attempts = max(1, max_retries + 1)
    error: Optional[LeafTranslationError] = None
    for attempt in range(attempts):
        if rate_limiter:
            rate_limiter.wait()
        try:
            candidate = translator.translate(masked, target_language)
            if not candidate:
                raise TranslationError("Provider returned an empty translation.")
            if strict_placeholders:
                issues = find_placeholder_issues(candidate, placeholders)
                if issues:
                    raise PlaceholderMismatchError("; ".join(issues), path=leaf.path)
            result = LeafResult(leaf.path, leaf.text, unmask_markup(candidate, placeholders), STATUS_TRANSLATED)
            _audit_leaf(audit, result, masked, placeholders)
            return result
        except ConfigurationError:
            raise
        except Exception as exc:  # noqa: BLE001 - a leaf never takes its siblings down
            if logger:
                logger.warning(
                    "Leaf %s attempt %s/%s failed: %s",
                    format_path(leaf.path),
                    attempt + 1,
                    attempts,
                    exc,
                )
            if isinstance(exc, LeafTranslationError):
                error = exc
            else:
                error = LeafTranslationError(str(exc), path=leaf.path, original_exception=exc)
            if attempt < attempts - 1:
                time.sleep(retry_backoff * (2**attempt))

    result = LeafResult(leaf.path, leaf.text, leaf.text, STATUS_FAILED, error=error)
    _audit_leaf(audit, result, masked, placeholders)
    return result


def _audit_leaf(
    audit: Optional[AuditTrail],
    result: LeafResult,
    masked: str,
    placeholders: Dict[str, str],
) -> None:
    if not audit:
        return
    audit.record(
        "leaf",
        {
            "path": format_path(result.path),
            "status": result.status,
            "masked_hash": sha1_text(masked),
            "placeholders": len(placeholders),
            "error": str(result.error) if result.error else None,
        },
    )


def run_translation(
    document: Any,
    target_language: str,
    translator: BaseTranslator,
    parallel_workers: int = 1,
    strict_placeholders: bool = False,
    max_retries: int = 0,
    retry_backoff: float = 1.0,
    rate_limiter: Optional[RateLimiter] = None,
    audit: Optional[AuditTrail] = None,
    logger: Optional[logging.Logger] = None,
) -> TranslationReport:
    """
    Translate every ``"translated"`` string of a decoded JSON object.

    The returned document has the same shape as the input; ``"original"`` values and
    every other field are copied unchanged. A leaf whose translation fails keeps
    its input value. Up to ``parallel_workers`` provider calls run at once.
    """

    if not target_language or not str(target_language).strip():
        raise ConfigurationError("A target language is required.")
    root = parse_document(document)
    if not isinstance(root, MappingNode):
        raise InputFormatError("Top-level JSON value must be an object.")

    leaves = list(iter_leaves(root))
    if logger:
        logger.info("Translating %s leaves into '%s' (%s workers).", len(leaves), target_language, parallel_workers)

    def _translate(leaf: TranslationLeaf) -> LeafResult:
        return translate_leaf(
            leaf,
            target_language,
            translator,
            strict_placeholders=strict_placeholders,
            max_retries=max_retries,
            retry_backoff=retry_backoff,
            rate_limiter=rate_limiter,
            audit=audit,
            logger=logger,
        )

    by_path: Dict[LeafPath, LeafResult] = {}
    if parallel_workers <= 1 or len(leaves) <= 1:
        for leaf in leaves:
            by_path[leaf.path] = _translate(leaf)
    else:
        with ThreadPoolExecutor(max_workers=parallel_workers) as executor:
            futures = [executor.submit(_translate, leaf) for leaf in leaves]
            try:
                for future in as_completed(futures):
                    result = future.result()
                    by_path[result.path] = result
            except ConfigurationError:
                for future in futures:
                    future.cancel()
                raise

    results = [by_path[leaf.path] for leaf in leaves]
    translated = render_document(root, {r.path: r.text for r in results})
    report = TranslationReport(translated, results)

    if audit:
        audit.record(
            "summary",
            {
                "target_language": target_language,
                "leaves": len(results),
                "translated": report.translated,
                "skipped": report.skipped,
                "failed": report.failed,
            },
        )
    if logger:
        logger.info(
            "Done: %s translated, %s skipped, %s failed.",
            report.translated,
            report.skipped,
            report.failed,
        )
    return report


def translate_document(
    document: Any,
    target_language: str,
    translator: BaseTranslator,
    **kwargs: Any,
) -> Any:
    """Same as :func:`run_translation` but returns only the translated document."""
    return run_translation(document, target_language, translator, **kwargs).document
