from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_configure() -> None:
    # lets the suite run from a plain checkout, without installing the package
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


@pytest.fixture
def locale_document():
    """A small en.json as exported by the localization tool."""
    return {
        "common": {
            "save": {"key": "common.save", "original": "Save", "translated": "Save"},
            "welcome": {
                "key": "common.welcome",
                "original": "Hello <b>World</b>, cost is ${price}",
                "translated": "Hello <b>World</b>, cost is ${price}",
                "changes": [{"original": "World", "translated": "World", "bold": True, "italic": False, "link": ""}],
            },
            "empty": {"key": "common.empty", "original": "", "translated": ""},
        },
        "version": 2,
        "published": False,
        "notes": None,
    }
