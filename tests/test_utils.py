# tests/test_utils.py
import pytest

from contact_scout.utils import email_domain, homepage_for, normalize_domain


@pytest.mark.parametrize(
    "value, expected",
    [
        ("acme.de", "acme.de"),
        ("WWW.Acme.DE", "acme.de"),
        ("https://www.acme.de:8443/kontakt?x=1", "acme.de"),
        ("shop.acme.co.uk/", "shop.acme.co.uk"),
        ("  ", ""),
    ],
)
def test_normalize_domain(value, expected):
    assert normalize_domain(value) == expected


def test_homepage_for():
    assert homepage_for("www.acme.de") == "https://acme.de"
    assert homepage_for("http://acme.de/start") == "http://acme.de/start"


def test_email_domain():
    assert email_domain(" Info@Acme.DE ") == "acme.de"
    assert email_domain("not-an-email") is None
    assert email_domain("root@localhost") is None
