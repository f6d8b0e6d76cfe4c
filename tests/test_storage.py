# tests/test_storage.py

from concurrent.futures import ThreadPoolExecutor

import pytest

from qrlink.core.errors import ConflictError, NotFoundError, ShortCodeGenerationError
from qrlink.models import RenderOptions
from qrlink.storage import MemoryCodeRegistry, MemoryUserStore


@pytest.fixture
def registry():
    return MemoryCodeRegistry()


def test_create_user_rejects_duplicate_username():
    users = MemoryUserStore()
    original = users.create_user("alice", "hash-1")

    with pytest.raises(ConflictError):
        users.create_user("alice", "hash-2")

    assert users.get_user_by_username("alice") == original
    assert users.get_user_by_id(original.id).hashed_password == "hash-1"


def test_unknown_user_lookups():
    users = MemoryUserStore()
    assert users.get_user_by_id("nope") is None
    assert users.get_user_by_username("nope") is None


def test_create_sets_defaults_and_indexes(registry):
    qr = registry.create("u1", "url", "example.com", RenderOptions(), title="Site")

    assert qr.click_count == 0
    assert qr.created_at == qr.updated_at
    assert registry.get_by_id(qr.id).short_code == qr.short_code
    assert registry.get_by_short_code(qr.short_code).id == qr.id


def test_short_codes_are_unique_over_many_creations(registry):
    codes = [registry.create("u1", "text", f"item {i}", RenderOptions()).short_code for i in range(1500)]
    assert len(set(codes)) == len(codes)
    for code in codes[:50]:
        assert registry.get_by_short_code(code).short_code == code


def test_concurrent_creations_never_share_a_code(registry):
    with ThreadPoolExecutor(max_workers=8) as pool:
        records = list(pool.map(lambda i: registry.create("u1", "text", str(i), RenderOptions()), range(400)))
    assert len({qr.short_code for qr in records}) == 400


def test_list_by_owner_filters_and_keeps_order(registry):
    first = registry.create("u1", "text", "a", RenderOptions())
    registry.create("u2", "text", "b", RenderOptions())
    second = registry.create("u1", "text", "c", RenderOptions())

    assert [qr.id for qr in registry.list_by_owner("u1")] == [first.id, second.id]
    assert registry.list_by_owner("nobody") == []


def test_record_click_increments_and_touches_updated_at(registry):
    qr = registry.create("u1", "url", "example.com", RenderOptions())
    clicked = registry.record_click(qr.id)

    assert clicked.click_count == 1
    assert clicked.updated_at >= qr.updated_at
    assert registry.get_by_id(qr.id).click_count == 1


def test_record_click_unknown_id(registry):
    with pytest.raises(NotFoundError):
        registry.record_click("missing")


def test_concurrent_clicks_are_not_lost(registry):
    qr = registry.create("u1", "url", "example.com", RenderOptions())

    with ThreadPoolExecutor(max_workers=16) as pool:
        list(pool.map(lambda _: registry.record_click(qr.id), range(1000)))

    assert registry.get_by_id(qr.id).click_count == 1000


def test_returned_records_are_copies(registry):
    qr = registry.create("u1", "url", "example.com", RenderOptions())
    qr.click_count = 99
    assert registry.get_by_id(qr.id).click_count == 0


def test_failed_generation_leaves_registry_untouched(registry, monkeypatch):
    def exhausted(is_taken):
        raise ShortCodeGenerationError("exhausted")

    monkeypatch.setattr("qrlink.storage.generate_short_code", exhausted)
    with pytest.raises(ShortCodeGenerationError):
        registry.create("u1", "url", "example.com", RenderOptions())
    assert registry.list_by_owner("u1") == []


def test_stats_by_owner(registry):
    a = registry.create("u1", "url", "a.com", RenderOptions())
    b = registry.create("u1", "url", "b.com", RenderOptions())
    for _ in range(3):
        registry.record_click(b.id)
    registry.record_click(a.id)

    stats = registry.stats_by_owner("u1")
    assert stats["total_codes"] == 2
    assert stats["total_clicks"] == 4
    assert [qr.id for qr in stats["top_codes"]] == [b.id, a.id]
