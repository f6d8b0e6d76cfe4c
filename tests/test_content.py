# tests/test_content.py

import pytest

from qrlink.core.content import format_content, parse_wifi


@pytest.mark.parametrize("content, expected", [
    ("example.com", "https://example.com"),
    ("https://example.com", "https://example.com"),
    ("http://example.com/a?b=1", "http://example.com/a?b=1"),
])
def test_url_gets_https_prefix_only_when_missing(content, expected):
    assert format_content("url", content) == expected


@pytest.mark.parametrize("qr_type, expected", [
    ("email", "mailto:bob@example.com"),
    ("phone", "tel:bob@example.com"),
    ("sms", "sms:bob@example.com"),
])
def test_uri_scheme_prefixes(qr_type, expected):
    assert format_content(qr_type, "bob@example.com") == expected


def test_wifi_with_security():
    assert format_content("wifi", "MyNet:pass123:WPA2") == "WIFI:T:WPA2;S:MyNet;P:pass123;H:false;;"


def test_wifi_defaults_to_wpa():
    assert format_content("wifi", "MyNet:pass123") == "WIFI:T:WPA;S:MyNet;P:pass123;H:false;;"


def test_wifi_without_password_is_left_alone():
    assert format_content("wifi", "JustAName") == "JustAName"


def test_parse_wifi_fills_missing_parts():
    wifi = parse_wifi("Cafe")
    assert wifi.ssid == "Cafe"
    assert wifi.password == ""
    assert wifi.security == "WPA"


def test_vcard_is_wrapped_with_formatted_name():
    formatted = format_content("vcard", "Jane Doe")
    assert formatted.startswith("BEGIN:VCARD")
    assert formatted.endswith("END:VCARD")
    assert "VERSION:3.0" in formatted
    assert "FN:Jane Doe" in formatted


def test_existing_vcard_passes_through():
    card = "BEGIN:VCARD\nVERSION:3.0\nFN:Jane\nTEL:123\nEND:VCARD"
    assert format_content("vcard", card) == card


def test_text_passes_through():
    assert format_content("text", "  hello: world  ") == "  hello: world  "
