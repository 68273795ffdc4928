from __future__ import annotations

import pytest

from poddiag.core.format import debug_description, format_duration, format_raw_hex, two_decimals
from poddiag.core.status import decode_detailed_status


@pytest.mark.parametrize(
    ("minutes", "expected"),
    [
        (0, "00:00"),
        (59, "00:59"),
        (1439, "23:59"),
        (1440, "1 day plus 00:00"),
        (1505, "1 day plus 01:05"),
        (2 * 1440 + 61, "2 days plus 01:01"),
    ],
)
def test_format_duration(minutes, expected):
    assert format_duration(minutes) == expected


def test_helpers():
    assert two_decimals(18.5) == "18.50"
    assert format_raw_hex(b"\x02\x08\xff") == "0208ff"


def test_debug_description_all_clear(make_record):
    raw = make_record(time_active=1505, total_pulses=370)
    lines = debug_description(decode_detailed_status(raw)).split("\n")
    assert lines == [
        "## DetailedStatus",
        f"* rawHex: {raw.hex()}",
        "* podProgressStatus: Normal",
        "* deliveryStatus: Scheduled basal",
        "* bolusNotDelivered: 0.00 U",
        "* lastProgrammingMessageSeqNum: 10",
        "* totalInsulinDelivered: 18.50 U",
        "* faultEventCode: Fault Event Code 0x00: no faults",
        "* faultEventTimeSinceActivation: none",
        "* reservoirLevel: 50+ U",
        "* timeActive: 1 day plus 01:05",
        "* unacknowledgedAlerts: No alerts",
        "* faultAccessingTables: False",
        "* errorEventInfo: NA",
        "* receiverLowGain: 0",
        "* radioRSSI: 0",
        "* previousPodProgressStatus: NA",
        "",
    ]


def test_debug_description_faulted(make_record):
    raw = make_record(
        progress=13,
        fault=0x14,
        fault_minutes=90,
        reservoir_pulses=100,
        error_event=0x7B,
        previous=0x09,
        alerts=0x10,
    )
    report = debug_description(decode_detailed_status(raw))
    assert "* faultEventCode: Fault Event Code 0x14: occluded\n" in report
    assert "* faultEventTimeSinceActivation: 01:30\n" in report
    assert "* reservoirLevel: 5.00 U\n" in report
    assert "* unacknowledgedAlerts: slot4_low_reservoir\n" in report
    assert "* errorEventInfo: rawValue: 0x7B, " in report
    assert "* previousPodProgressStatus: Low reservoir\n" in report
