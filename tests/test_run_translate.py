import json
import sys

import pandas as pd
import pytest

import run_translate


def _write_config(tmp_path, **translation):
    cfg = {
        "paths": {
            "output_dir": str(tmp_path / "exports"),
            "logs_dir": str(tmp_path / "logs"),
            "audit_report": str(tmp_path / "logs" / "audit.json"),
            "qa_report_csv": str(tmp_path / "logs" / "markup_report.csv"),
        },
        "translation": {"provider": "dummy", "target_language": "fr", "parallel_workers": 2, **translation},
        "qa": {"enabled": True},
    }
    path = tmp_path / "config.json"
    path.write_text(json.dumps(cfg), encoding="utf-8")
    return path


def _run(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["run_translate.py", *args])
    run_translate.main()


def test_cli_exports_target_named_file(tmp_path, monkeypatch):
    config = _write_config(tmp_path)
    doc = {"greeting": {"original": "Hi", "translated": "Hi <b>there</b> ${name}"}, "count": 3}
    source = tmp_path / "en.json"
    source.write_text(json.dumps(doc), encoding="utf-8")

    _run(monkeypatch, "--config", str(config), "--input", str(source), "--target", "es", "--provider", "dummy")

    out = tmp_path / "exports" / "es-translated.json"
    assert out.exists()
    assert json.loads(out.read_text(encoding="utf-8")) == doc

    audit = json.loads((tmp_path / "logs" / "audit.json").read_text(encoding="utf-8"))
    summary = [r for r in audit if r["kind"] == "summary"][0]
    assert summary["target_language"] == "es" and summary["translated"] == 1

    report = pd.read_csv(tmp_path / "logs" / "markup_report.csv")
    assert list(report["path"]) == ["greeting.translated"]


def test_cli_uses_configured_target_language(tmp_path, monkeypatch):
    config = _write_config(tmp_path)
    source = tmp_path / "en.json"
    source.write_text('{"a": {"translated": "x"}}', encoding="utf-8")

    _run(monkeypatch, "--config", str(config), "--input", str(source))

    assert (tmp_path / "exports" / "fr-translated.json").exists()


def test_cli_invalid_json_exits_without_output(tmp_path, monkeypatch):
    config = _write_config(tmp_path)
    source = tmp_path / "broken.json"
    source.write_text('{"a": {"translated": ', encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        _run(monkeypatch, "--config", str(config), "--input", str(source), "--target", "es")

    assert excinfo.value.code == 1
    assert not (tmp_path / "exports").exists()
    assert not (tmp_path / "logs" / "audit.json").exists()


def test_cli_unknown_provider_exits_without_output(tmp_path, monkeypatch):
    config = _write_config(tmp_path)
    source = tmp_path / "en.json"
    source.write_text('{"a": {"translated": "x"}}', encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        _run(monkeypatch, "--config", str(config), "--input", str(source), "--provider", "babelfish")

    assert excinfo.value.code == 1
    assert not (tmp_path / "exports").exists()


def test_cli_non_object_root_exits(tmp_path, monkeypatch):
    config = _write_config(tmp_path)
    source = tmp_path / "list.json"
    source.write_text('[{"translated": "x"}]', encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        _run(monkeypatch, "--config", str(config), "--input", str(source))

    assert excinfo.value.code == 1
    assert not (tmp_path / "exports").exists()
