from __future__ import annotations

import pytest

from poddiag.core.enums import AlertSet, AlertSlot, DeliveryStatus, PodProgressStatus
from poddiag.core.errors import UnknownEnumValue


def test_progress_status_from_raw():
    assert PodProgressStatus.from_raw(8) is PodProgressStatus.ABOVE_FIFTY_UNITS
    assert PodProgressStatus.from_raw(14) is PodProgressStatus.ACTIVATION_TIME_EXCEEDED


def test_progress_status_from_raw_rejects_out_of_domain():
    with pytest.raises(UnknownEnumValue) as excinfo:
        PodProgressStatus.from_raw(0x10, field="podProgressStatus")
    assert excinfo.value.field == "podProgressStatus"
    assert excinfo.value.raw == 0x10


@pytest.mark.parametrize("raw", [3, 7, 8, 11, 15])
def test_delivery_status_gaps_are_invalid(raw):
    with pytest.raises(UnknownEnumValue):
        DeliveryStatus.from_raw(raw)


def test_delivery_status_flags():
    assert DeliveryStatus.BOLUS_AND_TEMP_BASAL.bolusing
    assert DeliveryStatus.BOLUS_AND_TEMP_BASAL.temp_basal_running
    assert not DeliveryStatus.SCHEDULED_BASAL.bolusing
    assert DeliveryStatus.EXTENDED_BOLUS_RUNNING.description == "Extended bolus running"


def test_ready_for_delivery():
    assert PodProgressStatus.FIFTY_OR_LESS_UNITS.ready_for_delivery
    assert not PodProgressStatus.FAULT_EVENT_OCCURRED.ready_for_delivery


class TestAlertSet:
    def test_empty(self):
        alerts = AlertSet(0)
        assert not alerts
        assert len(alerts) == 0
        assert str(alerts) == "No alerts"

    def test_slots_follow_bit_positions(self):
        alerts = AlertSet(0x81)
        assert alerts.slots == [AlertSlot.SLOT0_AUTO_OFF, AlertSlot.SLOT7_EXPIRED]
        assert AlertSlot.SLOT7_EXPIRED in alerts
        assert AlertSlot.SLOT4_LOW_RESERVOIR not in alerts
        assert str(alerts) == "slot0_auto_off, slot7_expired"

    def test_from_slots_round_trips(self):
        alerts = AlertSet.from_slots([AlertSlot.SLOT4_LOW_RESERVOIR, AlertSlot.SLOT3_EXPIRATION_REMINDER])
        assert alerts.raw_value == 0x18
        assert alerts == AlertSet(0x18)
