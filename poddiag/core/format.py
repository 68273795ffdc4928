from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from poddiag.core.status import DetailedStatus


def format_raw_hex(data: bytes) -> str:
    return bytes(data).hex()


def two_decimals(value: float) -> str:
    return f"{float(value):.2f}"


def format_duration(minutes: int) -> str:
    total = int(minutes)
    days = total // (24 * 60)
    hours = (total // 60) % 24
    mins = total % 60
    clock = f"{hours:02d}:{mins:02d}"
    if days > 0:
        unit = "day" if days == 1 else "days"
        return f"{days} {unit} plus {clock}"
    return clock


def debug_description(status: DetailedStatus) -> str:
    fault_time = status.fault_event_time_since_activation_minutes
    reservoir = status.reservoir_level
    previous = status.previous_progress_status
    lines = [
        "## DetailedStatus",
        f"* rawHex: {format_raw_hex(status.data)}",
        f"* podProgressStatus: {status.progress_status.description}",
        f"* deliveryStatus: {status.delivery_status.description}",
        f"* bolusNotDelivered: {two_decimals(status.bolus_not_delivered)} U",
        f"* lastProgrammingMessageSeqNum: {status.last_programming_seq_num}",
        f"* totalInsulinDelivered: {two_decimals(status.total_insulin_delivered)} U",
        f"* faultEventCode: {status.fault_event_code.description}",
        f"* faultEventTimeSinceActivation: {format_duration(fault_time) if fault_time is not None else 'none'}",
        f"* reservoirLevel: {two_decimals(reservoir) if reservoir is not None else '50+'} U",
        f"* timeActive: {format_duration(status.time_active_minutes)}",
        f"* unacknowledgedAlerts: {status.unacknowledged_alerts}",
        f"* faultAccessingTables: {status.fault_accessing_tables}",
        f"* errorEventInfo: {status.error_event_info.description if status.error_event_info is not None else 'NA'}",
        f"* receiverLowGain: {status.receiver_low_gain}",
        f"* radioRSSI: {status.radio_rssi}",
        f"* previousPodProgressStatus: {previous.description if previous is not None else 'NA'}",
        "",
    ]
    return "\n".join(lines)
