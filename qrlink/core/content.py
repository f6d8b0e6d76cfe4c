# qrlink/core/content.py

from typing import NamedTuple


QR_TYPES = ("url", "text", "email", "phone", "sms", "wifi", "vcard")

# Types whose short link answers with an HTTP redirect
REDIRECT_TYPES = ("url", "email", "phone", "sms")

URI_PREFIXES = {
    "email": "mailto:",
    "phone": "tel:",
    "sms": "sms:",
}


class WifiCredentials(NamedTuple):
    ssid: str
    password: str
    security: str


def parse_wifi(content: str) -> WifiCredentials:
    """
    Splits "SSID:password[:security]" into its parts.
    Missing parts come back empty; security defaults to WPA.
    """
    parts = content.split(":")
    ssid = parts[0] if len(parts) > 0 else ""
    password = parts[1] if len(parts) > 1 else ""
    security = parts[2] if len(parts) > 2 and parts[2] else "WPA"
    return WifiCredentials(ssid, password, security)


def format_content(qr_type: str, content: str) -> str:
    """
    Builds the literal string encoded into the QR symbol.
    The same value is the redirect target for url/email/phone/sms codes.
    """
    if qr_type == "url":
        if content.startswith(("http://", "https://")):
            return content
        return f"https://{content}"

    if qr_type in URI_PREFIXES:
        return f"{URI_PREFIXES[qr_type]}{content}"

    if qr_type == "wifi":
        if len(content.split(":")) < 2:
            return content
        wifi = parse_wifi(content)
        return f"WIFI:T:{wifi.security};S:{wifi.ssid};P:{wifi.password};H:false;;"

    if qr_type == "vcard":
        if "BEGIN:VCARD" in content:
            return content
        return f"BEGIN:VCARD\nVERSION:3.0\nFN:{content}\nEND:VCARD"

    return content
