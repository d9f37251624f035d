import pytest

from l10n_translate.postproc import compare_markup_structure, interpolations_check
from l10n_translate.qa import run_markup_checks
from l10n_translate.translator import STATUS_TRANSLATED, LeafResult


def test_compare_markup_structure_detects_href_change():
    src = 'See <a href="https://example.com">link</a>.'
    trans = 'Voir <a href="https://evil.com">lien</a>.'
    ok, issues = compare_markup_structure(src, trans)
    assert not ok
    assert any("href" in x for x in issues)


def test_compare_markup_structure_accepts_translated_text():
    ok, issues = compare_markup_structure("Hi <b>there</b> <i>you</i>", "Hola <b>there</b> <i>you</i>")
    assert ok
    assert issues == []


def test_compare_markup_structure_detects_lost_tag():
    ok, issues = compare_markup_structure("Hi <b>there</b>", "Hola there")
    assert not ok
    assert "number of tags" in issues[0]


def test_interpolations_check():
    assert interpolations_check("Total ${n} of ${max}", "${max} au total ${n}") == []
    warnings = interpolations_check("Total ${n}", "Total n")
    assert warnings and "Interpolations changed" in warnings[0]


def test_run_markup_checks_rows():
    results = [
        LeafResult(("a", "translated"), "Hi <b>x</b> ${n}", "Hola <b>x</b> ${n}", STATUS_TRANSLATED),
        LeafResult(("b", 0, "translated"), "Hi <b>x</b>", "Hola x", STATUS_TRANSLATED),
    ]
    rows = run_markup_checks(results)
    assert [r["path"] for r in rows] == ["a.translated", "b[0].translated"]
    assert rows[0]["qa_ok_structure"] and rows[0]["qa_interpolation_warnings"] == ""
    assert not rows[1]["qa_ok_structure"]


def test_compare_markup_structure_checks_every_attribute():
    ok, issues = compare_markup_structure('<a href="/x">x</a>', '<a href="/x" target="_blank">x</a>')
    assert not ok
    assert "Attribute keys differ" in issues[0] and "target" in issues[0]
    with pytest.raises(TypeError):
        compare_markup_structure("<b>x</b>", "<b>x</b>", ignore_attrs={"href"})
