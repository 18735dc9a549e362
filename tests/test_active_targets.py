from __future__ import annotations

from datastore.active_targets import ActiveTargetTable


def test_get_active_returns_none_for_unknown_class() -> None:
    assert ActiveTargetTable().get_active("bayi") is None


def test_set_active_overwrites_per_class() -> None:
    table = ActiveTargetTable()

    table.set_active("bayi", "10", source="mqtt")
    table.set_active("balita", "7", source="http")
    table.set_active("bayi", "11", source="http")

    assert table.get_active("bayi") == "11"
    assert table.get_active("balita") == "7"
    assert table.snapshot() == {"bayi": "11", "balita": "7"}


def test_snapshot_is_a_copy() -> None:
    table = ActiveTargetTable()
    table.set_active("bayi", "10")

    table.snapshot()["bayi"] = "99"

    assert table.get_active("bayi") == "10"
