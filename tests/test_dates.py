from datetime import date

import pytest

from jtw.dates import resolve_date, validate_date_text

TODAY = date(2024, 5, 31)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("today", "2024-05-31"),
        ("", "2024-05-31"),
        ("Сегодня", "2024-05-31"),
        ("yesterday", "2024-05-30"),
        ("вчера", "2024-05-30"),
        ("tomorrow", "2024-06-01"),
        ("2024-05-01", "2024-05-01"),
        ("May 3 2024", "2024-05-03"),
        ("3 May", "2024-05-03"),
    ],
)
def test_resolve_date(text, expected):
    assert resolve_date(text, today=TODAY) == expected


def test_gibberish_is_rejected():
    with pytest.raises(ValueError):
        resolve_date("whenever", today=TODAY)


def test_validate_date_text():
    assert validate_date_text("yesterday") is True
    assert validate_date_text("whenever") == "Enter a date like 2024-05-31, today or yesterday"
