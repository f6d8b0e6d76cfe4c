# tests/helpers.py


def register(client, username="alice", password="s3cret-pass"):
    return client.post("/api/register", json={"username": username, "password": password})


def create_qr(client, **body):
    payload = {"type": "url", "content": "example.com"}
    payload.update(body)
    res = client.post("/api/qr-codes", json=payload)
    assert res.status_code == 201, res.text
    return res.json()
