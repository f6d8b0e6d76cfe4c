# tests/test_analytics.py

from tests.helpers import create_qr


def test_analytics_requires_auth(client):
    assert client.get("/api/analytics").status_code == 401


def test_analytics_totals(logged_in):
    site = create_qr(logged_in, content="site.com", title="Site")
    card = create_qr(logged_in, type="vcard", content="Jane", title="Card")
    create_qr(logged_in, type="text", content="unused")

    for _ in range(3):
        logged_in.get(f"/api/r/{card['shortCode']}")
    logged_in.get(f"/api/r/{site['shortCode']}", follow_redirects=False)

    stats = logged_in.get("/api/analytics").json()
    assert stats["totalCodes"] == 3
    assert stats["totalClicks"] == 4
    assert stats["topCodes"][0] == {
        "id": card["id"],
        "title": "Card",
        "shortCode": card["shortCode"],
        "clickCount": 3,
    }
    assert stats["topCodes"][1]["id"] == site["id"]


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}
