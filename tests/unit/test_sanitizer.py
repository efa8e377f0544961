from __future__ import annotations

import pytest

from room_chat.application.policies.sanitizer import strip_markup


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Ana", "Ana"),
        ("  Ana  ", "Ana"),
        ("<b>Ana</b>", "Ana"),
        ("<script>alert(1)</script>Beto", "Beto"),
        ("Tom &amp; Jerry", "Tom & Jerry"),
        ("<p> hi <i>there</i> </p>", "hi there"),
        ("<br/>", ""),
    ],
)
def test_strip_markup(raw, expected):
    assert strip_markup(raw) == expected
