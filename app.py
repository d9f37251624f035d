from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import pandas as pd
import streamlit as st
from dotenv import load_dotenv

from l10n_translate import storage
from l10n_translate.errors import ConfigurationError, InputFormatError
from l10n_translate.providers import build_translator
from l10n_translate.qa import run_markup_checks
from l10n_translate.translator import RateLimiter, run_translation
from l10n_translate.utils import setup_logger


st.set_page_config(page_title="JSON Translation System", layout="wide")
load_dotenv()

LANGUAGES = {"es": "Spanish", "fr": "French", "de": "German"}


def load_config(path: str) -> Dict[str, Any]:
    if Path(path).exists():
        return storage.read_json(path)
    if Path("config.example.json").exists():
        return storage.read_json("config.example.json")
    return {"paths": {}, "translation": {"provider": "dummy"}}


def main() -> None:
    st.title("Translation System")

    with st.sidebar:
        st.header("Configuration")
        config_path = st.text_input("Path to config.json", value="config.json")
        if st.button("Load config") or "cfg" not in st.session_state:
            st.session_state["cfg"] = load_config(config_path)
        cfg = st.session_state["cfg"]
        st.json(cfg, expanded=False)

    cfg = st.session_state["cfg"]
    tcfg = cfg.get("translation", {})
    logger = setup_logger(cfg.get("paths", {}).get("logs_dir", "logs"))

    st.subheader("1. Upload JSON File")
    uploaded = st.file_uploader("Click to upload or drag and drop a JSON file here", type=["json"])
    if uploaded is not None:
        st.session_state["input_json"] = uploaded.getvalue().decode("utf-8")

    st.subheader("2. Select Target Language")
    codes = list(LANGUAGES)
    default_code = tcfg.get("target_language", "es")
    target_language = st.selectbox(
        "Target language",
        codes,
        index=codes.index(default_code) if default_code in codes else 0,
        format_func=lambda code: LANGUAGES[code],
    )

    st.subheader("3. Input JSON")
    input_json = st.text_area(
        "Input JSON",
        value=st.session_state.get("input_json", ""),
        height=240,
        placeholder="Your JSON will appear here after upload, or you can paste it manually",
    )

    if st.button("Translate", disabled=not input_json.strip()):
        try:
            document = storage.parse_document_text(input_json)
            translator = build_translator(tcfg.get("provider", "google"), cfg)
            sched_cfg = tcfg.get("scheduling", {})
            with st.spinner("Translating..."):
                report = run_translation(
                    document,
                    target_language,
                    translator,
                    parallel_workers=int(tcfg.get("parallel_workers", 4)),
                    strict_placeholders=bool(tcfg.get("strict_placeholders", False)),
                    max_retries=int(sched_cfg.get("max_retries", 0)),
                    retry_backoff=float(sched_cfg.get("retry_backoff_seconds", 1.0)),
                    rate_limiter=RateLimiter(int(sched_cfg.get("requests_per_minute", 0))),
                    logger=logger,
                )
        except InputFormatError as exc:
            st.error(f"Invalid JSON file: {exc}")
            st.session_state.pop("report", None)
        except ConfigurationError as exc:
            st.error(f"Error processing translations: {exc}")
            st.session_state.pop("report", None)
        except Exception as exc:
            logger.exception("Translation failed.")
            st.error(f"Error processing translations: {exc}")
            st.session_state.pop("report", None)
        else:
            st.session_state["report"] = report
            st.session_state["report_language"] = target_language

    report = st.session_state.get("report")
    if report is None:
        return

    st.subheader("4. Output JSON")
    lang = st.session_state.get("report_language", target_language)
    if report.failed:
        st.warning(f"{report.failed} field(s) could not be translated and were left unchanged.")
    output_json = storage.dumps_json(report.document)
    st.code(output_json, language="json")
    st.download_button(
        "Download Translated JSON",
        data=output_json.encode("utf-8"),
        file_name=f"{lang}-translated.json",
        mime="application/json",
    )

    with st.expander("Markup checks"):
        st.dataframe(pd.DataFrame(run_markup_checks(report.results)), use_container_width=True)


if __name__ == "__main__":
    main()
