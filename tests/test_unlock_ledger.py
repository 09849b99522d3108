"""Unlock ledger: capped counter per (story, day), per device."""

from datetime import timedelta

import pytest

from bedtime_stories.errors import InvalidIdentifierError
from bedtime_stories.persistence import UnlockStore
from bedtime_stories.services import UnlockLedger
from conftest import TODAY


class Clock:
    def __init__(self, day) -> None:
        self.day = day

    def __call__(self):
        return self.day


def _ledger(unlock_store, device_id: str = "tablet-1", clock=None) -> UnlockLedger:
    return UnlockLedger(unlock_store, device_id, clock=clock or Clock(TODAY))


def test_counter_caps_at_three(unlock_store) -> None:
    ledger = _ledger(unlock_store)
    results = [ledger.record_ad_impression("moon-fox") for _ in range(5)]

    assert [r.ads_completed for r in results] == [1, 2, 3, 3, 3]
    assert [r.unlocked for r in results] == [False, False, True, True, True]
    assert ledger.is_unlocked("moon-fox")


def test_not_unlocked_before_threshold(unlock_store) -> None:
    ledger = _ledger(unlock_store)
    assert not ledger.is_unlocked("moon-fox")
    ledger.record_ad_impression("moon-fox")
    ledger.record_ad_impression("moon-fox")
    assert not ledger.is_unlocked("moon-fox")


def test_unlock_expires_next_day(unlock_store) -> None:
    clock = Clock(TODAY)
    ledger = _ledger(unlock_store, clock=clock)
    for _ in range(3):
        ledger.record_ad_impression("moon-fox")
    assert ledger.is_unlocked("moon-fox")

    clock.day = TODAY + timedelta(days=1)
    assert not ledger.is_unlocked("moon-fox")
    assert ledger.record_ad_impression("moon-fox").ads_completed == 1


def test_stories_and_devices_are_independent(unlock_store) -> None:
    tablet = _ledger(unlock_store, "tablet-1")
    phone = _ledger(unlock_store, "phone-2")
    for _ in range(3):
        tablet.record_ad_impression("moon-fox")

    assert tablet.is_unlocked("moon-fox")
    assert not tablet.is_unlocked("sleepy-bear")
    assert not phone.is_unlocked("moon-fox")


def test_progress_survives_new_store_instance(tmp_path) -> None:
    _ledger(UnlockStore(tmp_path)).record_ad_impression("moon-fox")
    _ledger(UnlockStore(tmp_path)).record_ad_impression("moon-fox")

    record = _ledger(UnlockStore(tmp_path)).record_for("moon-fox")
    assert record is not None
    assert record.ads_completed == 2
    assert record.day == TODAY


def test_unsafe_device_id_rejected(unlock_store) -> None:
    _ledger(unlock_store, "tablet1").record_ad_impression("moon-fox")

    with pytest.raises(InvalidIdentifierError):
        _ledger(unlock_store, "tablet.1").record_ad_impression("moon-fox")
    with pytest.raises(InvalidIdentifierError):
        _ledger(unlock_store, "../tablet1").record_for("moon-fox")

    assert _ledger(unlock_store, "tablet1").record_for("moon-fox").ads_completed == 1
