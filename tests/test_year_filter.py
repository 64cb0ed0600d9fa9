import pytest

from webshare_stremio.services.year_filter import extract_year, has_year, is_year_match


@pytest.mark.parametrize(
    "text, expected",
    [
        ("The.Matrix.1999.1080p", "1999"),
        ("Wonder Woman 1984", "1984"),
        ("2010-07-16", "2010"),
        ("Blade Runner 20499", None),
        ("720p x264", None),
        ("", None),
        (None, None),
    ],
)
def test_extract_year(text, expected):
    assert extract_year(text) == expected


def test_has_year():
    assert has_year("Eden 2024")
    assert not has_year("Eden")


def test_is_year_match():
    assert is_year_match(None, None)
    assert is_year_match("", "")
    assert is_year_match("2024", 2024)
    assert not is_year_match("2024", None)
    assert not is_year_match(None, "2024")
    assert is_year_match("2024", "2025", tolerance=1)
    assert is_year_match("2024", "2023", tolerance=1)
    assert not is_year_match("2024", "2026", tolerance=1)
    assert not is_year_match("2024", "2025")
