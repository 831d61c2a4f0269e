# tests/test_phones.py
import pytest
from bs4 import BeautifulSoup

from contact_scout.config import PhoneWeights
from contact_scout.extractor import extract_facts, validate_phone
from contact_scout.extractor.phones import extract_phones
from contact_scout.extractor.text import soup_text, strip_markup


def phones_of(html: str, **kwargs):
    soup = BeautifulSoup(html, "html.parser")
    strip_markup(soup)
    return extract_phones(soup, soup_text(soup), **kwargs)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("+380 (50) 123-45-67", "+380501234567"),
        ("+49 30 1234567", "+49301234567"),
        ("(212) 555-0147", "2125550147"),
        ("030 / 123 45 67", "0301234567"),
        ("  +1.415.555.0100 ", "+14155550100"),
    ],
)
def test_validate_phone_normalizes_and_keeps_plus(raw, expected):
    assert validate_phone(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [
        "20231215",          # 8-digit date
        "2023",              # year
        "1999",
        "123456",            # too short
        "+1234567890123456", # too long
        "0000000",           # all identical
        "",
    ],
)
def test_validate_phone_rejects(raw):
    assert validate_phone(raw) is None


def test_tel_link_is_top_ranked_with_link_priority():
    html = (
        '<html><body><p>Sales 0800 123 4567</p>'
        '<a href="tel:+380501234567">Call us</a></body></html>'
    )
    phones = phones_of(html)
    assert phones[0].normalized == "+380501234567"
    assert phones[0].priority == PhoneWeights().tel_link


def test_date_after_label_yields_no_phone():
    assert phones_of("<html><body><p>Phone: 20231215</p></body></html>") == ()


def test_dates_and_years_in_text_are_ignored():
    html = "<html><body><p>Founded 1998. Updated 2024-01-15. Since 2001-2020.</p></body></html>"
    assert phones_of(html) == ()


def test_label_adjacent_beats_plain_number():
    html = (
        "<html><body>"
        "<p>Our office 212-555-0199 is closed on Sundays.</p>"
        "<p>Tel: +44 20 7946 0958</p>"
        "</body></html>"
    )
    phones = phones_of(html)
    numbers = [p.normalized for p in phones]
    assert numbers[0] == "+442079460958"
    assert "2125550199" in numbers
    by_number = {p.normalized: p.priority for p in phones}
    assert by_number["+442079460958"] > by_number["2125550199"]


def test_same_number_in_several_tiers_is_merged_once():
    html = (
        '<html><body><footer>Phone: +49 30 1234567</footer>'
        '<a href="tel:+49301234567">call</a></body></html>'
    )
    phones = phones_of(html)
    assert [p.normalized for p in phones] == ["+49301234567"]
    w = PhoneWeights()
    # tel link + label + international + footer section
    assert phones[0].priority == w.tel_link + w.label_adjacent + w.international_long + w.section


def test_plus_is_kept_when_any_occurrence_has_it():
    html = '<html><body><a href="tel:380501234567">x</a><p>Call +380 50 123 45 67</p></body></html>'
    phones = phones_of(html)
    assert phones[0].normalized == "+380501234567"


def test_limit_caps_number_of_candidates():
    rows = "".join(f'<a href="tel:+3805012345{i:02d}">x</a>' for i in range(15))
    phones = phones_of(f"<html><body>{rows}</body></html>", limit=5)
    assert len(phones) == 5


def test_custom_weights_change_ranking():
    weights = PhoneWeights(tel_link=1, plain=50)
    html = (
        '<html><body><a href="tel:+380501234567">x</a>'
        '<p>Local (212) 555-0147</p></body></html>'
    )
    phones = phones_of(html, weights=weights)
    assert phones[0].normalized == "2125550147"


def test_extract_facts_exposes_ranked_phone_numbers():
    facts = extract_facts('<html><body><a href="tel:+380501234567">Call us</a></body></html>')
    assert facts.phone_numbers == ["+380501234567"]
