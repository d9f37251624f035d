import re

from l10n_translate.markup import find_placeholder_issues, mask_markup, placeholder, unmask_markup


_TOKEN_RE = re.compile(r"\{\{([0-9a-f]{32})\}\}")


def test_mask_markup_without_markup_is_identity():
    masked, placeholders = mask_markup("Plain text, nothing to hide.")
    assert masked == "Plain text, nothing to hide."
    assert placeholders == {}


def test_mask_markup_captures_each_kind_as_one_fragment():
    text = 'Hi <b>bold</b> and <i>it</i>, see <a href="https://x.test/a?b=1">docs</a> for ${user.name}'
    masked, placeholders = mask_markup(text)

    assert sorted(placeholders.values()) == sorted(
        ["<b>bold</b>", "<i>it</i>", '<a href="https://x.test/a?b=1">docs</a>', "${user.name}"]
    )
    assert "<b>" not in masked and "${" not in masked and "href" not in masked
    assert masked.startswith("Hi {{")
    assert set(_TOKEN_RE.findall(masked)) == set(placeholders)


def test_mask_markup_is_non_greedy():
    masked, placeholders = mask_markup("<b>a</b>x<b>c</b>")
    assert sorted(placeholders.values()) == ["<b>a</b>", "<b>c</b>"]
    assert "x" in masked
    assert len(_TOKEN_RE.findall(masked)) == 2


def test_tokens_are_unique_for_identical_fragments():
    _, placeholders = mask_markup("${n} and ${n}")
    assert len(placeholders) == 2
    assert list(placeholders.values()) == ["${n}", "${n}"]


def test_identity_translation_round_trip():
    samples = [
        "Hello <b>World</b>, cost is ${price}",
        '<i>Note</i>: <a href="/x">read</a> then <b>act</b> on ${count} items',
        "no markup at all",
        "",
        "{{not-a-token}} stays",
    ]
    for text in samples:
        masked, placeholders = mask_markup(text)
        assert unmask_markup(masked, placeholders) == text


def test_nested_markup_round_trip():
    text = '<a href="/home"><b>Home</b></a> page'
    masked, placeholders = mask_markup(text)
    assert len(_TOKEN_RE.findall(masked)) == 1
    assert unmask_markup(masked, placeholders) == text
    assert find_placeholder_issues(masked, placeholders) == []


def test_unmask_restores_at_translated_positions():
    masked, placeholders = mask_markup("Hello <b>World</b>")
    token = next(iter(placeholders))
    translated = masked.replace("Hello", "Hola")
    assert unmask_markup(translated, placeholders) == "Hola <b>World</b>"
    assert unmask_markup(f"{placeholder(token)} hola", placeholders) == "<b>World</b> hola"


def test_unmask_replaces_only_first_occurrence_and_tolerates_missing():
    masked, placeholders = mask_markup("a ${x}")
    token = next(iter(placeholders))
    doubled = f"{placeholder(token)} b {placeholder(token)}"
    assert unmask_markup(doubled, placeholders) == f"${{x}} b {placeholder(token)}"
    assert unmask_markup("token dropped", placeholders) == "token dropped"


def test_find_placeholder_issues_reports_missing_and_duplicates():
    masked, placeholders = mask_markup("<b>one</b> ${two}")
    tokens = list(placeholders)
    assert find_placeholder_issues(masked, placeholders) == []

    dropped = masked.replace(placeholder(tokens[0]), "")
    issues = find_placeholder_issues(dropped, placeholders)
    assert len(issues) == 1 and "missing" in issues[0]

    duplicated = masked + " " + placeholder(tokens[1])
    issues = find_placeholder_issues(duplicated, placeholders)
    assert len(issues) == 1 and "2 times" in issues[0]
