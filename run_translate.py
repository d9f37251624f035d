from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Dict, List

from dotenv import load_dotenv

from l10n_translate import storage
from l10n_translate.document import format_path
from l10n_translate.errors import ConfigurationError, InputFormatError
from l10n_translate.providers import BaseTranslator, build_translator
from l10n_translate.qa import run_markup_checks
from l10n_translate.translator import AuditTrail, RateLimiter, TranslationReport, run_translation
from l10n_translate.utils import setup_logger


DEFAULT_CONFIG: Dict[str, Any] = {
    "paths": {
        "output_dir": "data/exports",
        "logs_dir": "logs",
        "audit_report": "logs/audit.json",
        "qa_report_csv": "logs/markup_report.csv",
    },
    "translation": {
        "provider": "google",
        "target_language": "es",
        "parallel_workers": 4,
        "strict_placeholders": False,
        "scheduling": {"requests_per_minute": 0, "max_retries": 0, "retry_backoff_seconds": 1.0},
    },
    "qa": {"enabled": True},
}


def load_config(path: str) -> Dict[str, Any]:
    if not Path(path).exists():
        return DEFAULT_CONFIG
    cfg = storage.read_json(path)
    for section, defaults in DEFAULT_CONFIG.items():
        cfg.setdefault(section, defaults)
    return cfg


def translate_pipeline(
    document: Dict[str, Any],
    translator: BaseTranslator,
    target_language: str,
    cfg: Dict[str, Any],
    audit: AuditTrail,
    logger,
) -> TranslationReport:
    tcfg = cfg["translation"]
    sched_cfg = tcfg.get("scheduling", {})
    limiter = RateLimiter(int(sched_cfg.get("requests_per_minute", 0)))
    report = run_translation(
        document,
        target_language,
        translator,
        parallel_workers=int(tcfg.get("parallel_workers", 4)),
        strict_placeholders=bool(tcfg.get("strict_placeholders", False)),
        max_retries=int(sched_cfg.get("max_retries", 0)),
        retry_backoff=float(sched_cfg.get("retry_backoff_seconds", 1.0)),
        rate_limiter=limiter,
        audit=audit,
        logger=logger,
    )
    for res in report.failures:
        logger.warning("   Left untranslated: %s (%s)", format_path(res.path), res.error)
    return report


def run_qa_reports(report: TranslationReport, paths: Dict[str, Any], logger) -> List[Dict[str, Any]]:
    rows = run_markup_checks(report.results)
    storage.write_report_csv(paths.get("qa_report_csv", "logs/markup_report.csv"), rows)
    n_bad = sum(1 for row in rows if not row["qa_ok_structure"] or row["qa_interpolation_warnings"])
    logger.info("   Markup report: %s (%s leaves with issues)", paths.get("qa_report_csv"), n_bad)
    return rows


def main() -> None:
    parser = argparse.ArgumentParser(description="Translate the \"translated\" fields of a JSON localization file.")
    parser.add_argument("--config", type=str, default="config.json", help="Path to config.json")
    parser.add_argument("--input", type=str, default=None, help="Input JSON document (overrides paths.input_json)")
    parser.add_argument("--target", type=str, default=None, help="Target language code, e.g. es")
    parser.add_argument("--provider", type=str, default=None, help="google | deepl | openai | dummy")
    parser.add_argument("--output", type=str, default=None, help="Output JSON path")
    args = parser.parse_args()

    load_dotenv()

    cfg = load_config(args.config)
    paths = cfg["paths"]
    tcfg = cfg["translation"]
    target_language = args.target or tcfg.get("target_language", "")
    provider = args.provider or tcfg.get("provider", "google")

    logger = setup_logger(paths.get("logs_dir", "logs"))
    audit = AuditTrail()

    input_path = args.input or paths.get("input_json")
    if not input_path:
        logger.error("No input document: pass --input or set paths.input_json.")
        raise SystemExit(1)

    try:
        logger.info("1) Load document…")
        document = storage.load_document(input_path)
    except (FileNotFoundError, InputFormatError) as exc:
        logger.error("Cannot read %s: %s", input_path, exc)
        raise SystemExit(1)

    try:
        logger.info("2) Provider: %s", provider)
        translator = build_translator(provider, cfg)
    except ConfigurationError as exc:
        logger.error(str(exc))
        raise SystemExit(1)

    try:
        logger.info("3) Translation into '%s'…", target_language)
        report = translate_pipeline(document, translator, target_language, cfg, audit, logger)
    except (ConfigurationError, InputFormatError) as exc:
        logger.error(str(exc))
        raise SystemExit(1)
    except Exception:
        logger.exception("Translation failed.")
        raise SystemExit(1)

    if cfg.get("qa", {}).get("enabled", True):
        try:
            logger.info("4) QA reports…")
            run_qa_reports(report, paths, logger)
        except Exception:
            logger.exception("QA stage failed.")
            raise SystemExit(1)
    else:
        logger.info("4) QA reports skipped (qa.enabled=false).")

    audit_path = paths.get("audit_report", "logs/audit.json")
    storage.write_json(audit_path, audit.as_list())
    logger.info(f"   Audit trail saved to: {audit_path}")

    logger.info("5) Export…")
    out_path = Path(args.output or Path(paths.get("output_dir", "data/exports")) / f"{target_language}-translated.json")
    storage.write_json(out_path, report.document)
    logger.info(
        f"   Exported: {out_path} ({report.translated} translated, {report.skipped} skipped, {report.failed} failed)"
    )


if __name__ == "__main__":
    main()
