from __future__ import annotations

import pytest


def build_record(
    *,
    progress: int = 0x08,
    delivery: int = 0x01,
    bolus_not_delivered_pulses: int = 0,
    seq_num: int = 0x0A,
    total_pulses: int = 0,
    fault: int = 0x00,
    fault_minutes: int = 0xFFFF,
    reservoir_pulses: int = 0x3FF,
    time_active: int = 0,
    alerts: int = 0x00,
    tables: int = 0x00,
    error_event: int = 0x00,
    radio: int = 0x00,
    previous: int = 0xFF,
    trailer: bytes = b"\x00",
) -> bytes:
    return (
        bytes(
            [
                0x02,
                progress,
                delivery,
                (bolus_not_delivered_pulses >> 8) & 0x03,
                bolus_not_delivered_pulses & 0xFF,
                seq_num,
                (total_pulses >> 8) & 0xFF,
                total_pulses & 0xFF,
                fault,
                (fault_minutes >> 8) & 0xFF,
                fault_minutes & 0xFF,
                (reservoir_pulses >> 8) & 0x03,
                reservoir_pulses & 0xFF,
                (time_active >> 8) & 0xFF,
                time_active & 0xFF,
                alerts,
                tables,
                error_event,
                radio,
                previous,
            ]
        )
        + trailer
    )


@pytest.fixture
def make_record():
    return build_record


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for name in ("PODDIAG_PULSE_SIZE", "PODDIAG_MAX_RESERVOIR", "PODDIAG_REF_LABEL", "PODDIAG_CONFIG_DIR"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    return tmp_path
