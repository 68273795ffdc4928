from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from poddiag.core.constants import (
    DEFAULT_CONSTANTS,
    DETAILED_STATUS_MIN_LENGTH,
    POD_INFO_TYPE_DETAILED_STATUS,
    DeviceConstants,
)
from poddiag.core.enums import AlertSet, DeliveryStatus, PodProgressStatus
from poddiag.core.errors import InsufficientData, StatusDecodeError
from poddiag.core.faults import DEFAULT_CLASSIFIER, FaultClassifier, FaultEventCode
from poddiag.core.fields import read_bits, read_u8, read_u10, read_u16be
from poddiag.core.reference import fault_is_present, reference_code


log = logging.getLogger(__name__)

# Record layout (offsets into the pod info payload):
#   0  1  2  3  4 5  6 7  8 9 10 1112 1314 15 16 17 18 19 2021
#   02 0J 0K LLLL MM NNNN PP QQQQ RRRR SSSS TT UU VV WW 0X YYYY
_PROGRESS = 1
_DELIVERY = 2
_BOLUS_NOT_DELIVERED = 3
_SEQ_NUM = 5
_TOTAL_DELIVERED = 6
_FAULT_CODE = 8
_FAULT_TIME = 9
_RESERVOIR = 11
_TIME_ACTIVE = 13
_ALERTS = 15
_TABLES = 16
_ERROR_EVENT = 17
_RADIO = 18
_PREVIOUS_PROGRESS = 19

_FAULT_TIME_NONE = 0xFFFF
_ERROR_EVENT_NONE = 0x00
_PREVIOUS_PROGRESS_NONE = 0xFF


@dataclass(frozen=True)
class ErrorEventInfo:
    """Decoded error event byte.

    Bit layout ``abbcdddd``: a = insulin state table corruption found during
    error logging, bb = internal occlusion type, c = immediate bolus in
    progress during the error, dddd = pod progress at the first logged fault.
    """

    raw_value: int
    insulin_state_table_corruption: bool
    occlusion_type: int
    immediate_bolus_in_progress: bool
    progress_status: PodProgressStatus

    @property
    def description(self) -> str:
        return ", ".join(
            [
                f"rawValue: 0x{self.raw_value:02X}",
                f"insulinStateTableCorruption: {self.insulin_state_table_corruption}",
                f"occlusionType: {self.occlusion_type}",
                f"immediateBolusInProgress: {self.immediate_bolus_in_progress}",
                f"podProgressStatus: {self.progress_status.name}",
            ]
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "raw": self.raw_value,
            "insulin_state_table_corruption": self.insulin_state_table_corruption,
            "occlusion_type": self.occlusion_type,
            "immediate_bolus_in_progress": self.immediate_bolus_in_progress,
            "progress_status": self.progress_status.name,
        }


def decode_error_event(raw: int) -> ErrorEventInfo:
    value = int(raw) & 0xFF
    data = bytes([value])
    return ErrorEventInfo(
        raw_value=value,
        insulin_state_table_corruption=bool(read_bits(data, 0, 0x80)),
        occlusion_type=read_bits(data, 0, 0x60, 5),
        immediate_bolus_in_progress=bool(read_bits(data, 0, 0x10)),
        progress_status=PodProgressStatus.from_raw(read_bits(data, 0, 0x0F), field="ErrorEventInfo.podProgressStatus"),
    )


@dataclass(frozen=True)
class DetailedStatus:
    progress_status: PodProgressStatus
    delivery_status: DeliveryStatus
    bolus_not_delivered: float
    last_programming_seq_num: int
    total_insulin_delivered: float
    fault_event_code: FaultEventCode
    fault_event_time_since_activation_minutes: int | None
    reservoir_level: float | None
    time_active_minutes: int
    unacknowledged_alerts: AlertSet
    fault_accessing_tables: bool
    error_event_info: ErrorEventInfo | None
    receiver_low_gain: int
    radio_rssi: int
    previous_progress_status: PodProgressStatus | None
    data: bytes

    @property
    def pod_info_type(self) -> int:
        return POD_INFO_TYPE_DETAILED_STATUS

    @property
    def raw_value(self) -> bytes:
        return self.data

    @property
    def is_faulted(self) -> bool:
        return fault_is_present(self)

    @property
    def pdm_ref(self) -> str | None:
        return reference_code(self)

    def to_dict(self) -> dict[str, Any]:
        # Key order follows the wire layout.
        return {
            "raw": self.data.hex().upper(),
            "progress_status": self.progress_status.name,
            "delivery_status": self.delivery_status.name,
            "bolus_not_delivered": self.bolus_not_delivered,
            "last_programming_seq_num": self.last_programming_seq_num,
            "total_insulin_delivered": self.total_insulin_delivered,
            "fault_event_code": self.fault_event_code.to_dict(),
            "fault_event_time_since_activation_minutes": self.fault_event_time_since_activation_minutes,
            "reservoir_level": self.reservoir_level,
            "time_active_minutes": self.time_active_minutes,
            "unacknowledged_alerts": [slot.name for slot in self.unacknowledged_alerts],
            "fault_accessing_tables": self.fault_accessing_tables,
            "error_event_info": self.error_event_info.to_dict() if self.error_event_info is not None else None,
            "receiver_low_gain": self.receiver_low_gain,
            "radio_rssi": self.radio_rssi,
            "previous_progress_status": (
                self.previous_progress_status.name if self.previous_progress_status is not None else None
            ),
        }


def decode_detailed_status(
    data: bytes | bytearray | memoryview,
    *,
    constants: DeviceConstants = DEFAULT_CONSTANTS,
    classifier: FaultClassifier = DEFAULT_CLASSIFIER,
) -> DetailedStatus:
    """Decode a detailed status pod info payload.

    Raises InsufficientData for payloads shorter than 21 bytes and
    UnknownEnumValue when a state byte is outside its enumeration. Bytes past
    offset 20 are kept in ``data`` but not interpreted.
    """

    raw = bytes(data)
    if len(raw) < DETAILED_STATUS_MIN_LENGTH:
        raise InsufficientData(len(raw), DETAILED_STATUS_MIN_LENGTH)

    pulse_size = float(constants.pulse_size)

    progress_status = PodProgressStatus.from_raw(read_u8(raw, _PROGRESS), field="PodProgressStatus")
    delivery_status = DeliveryStatus.from_raw(read_bits(raw, _DELIVERY, 0x0F), field="DeliveryStatus")

    fault_minutes: int | None = read_u16be(raw, _FAULT_TIME)
    if fault_minutes == _FAULT_TIME_NONE:
        fault_minutes = None

    reservoir: float | None = read_u10(raw, _RESERVOIR) * pulse_size
    if reservoir > float(constants.maximum_reservoir_reading):
        reservoir = None

    error_event_raw = read_u8(raw, _ERROR_EVENT)
    error_event = decode_error_event(error_event_raw) if error_event_raw != _ERROR_EVENT_NONE else None

    previous_raw = read_u8(raw, _PREVIOUS_PROGRESS)
    previous_status = None
    if previous_raw != _PREVIOUS_PROGRESS_NONE:
        previous_status = PodProgressStatus.from_raw(previous_raw & 0x0F, field="previousPodProgressStatus")

    status = DetailedStatus(
        progress_status=progress_status,
        delivery_status=delivery_status,
        bolus_not_delivered=read_u10(raw, _BOLUS_NOT_DELIVERED) * pulse_size,
        last_programming_seq_num=read_u8(raw, _SEQ_NUM),
        total_insulin_delivered=read_u16be(raw, _TOTAL_DELIVERED) * pulse_size,
        fault_event_code=classifier.classify(read_u8(raw, _FAULT_CODE)),
        fault_event_time_since_activation_minutes=fault_minutes,
        reservoir_level=reservoir,
        time_active_minutes=read_u16be(raw, _TIME_ACTIVE),
        unacknowledged_alerts=AlertSet(read_u8(raw, _ALERTS)),
        fault_accessing_tables=bool(read_bits(raw, _TABLES, 0x02)),
        error_event_info=error_event,
        receiver_low_gain=read_bits(raw, _RADIO, 0xC0, 6),
        radio_rssi=read_bits(raw, _RADIO, 0x3F),
        previous_progress_status=previous_status,
        data=raw,
    )
    log.debug(
        "Decoded detailed status",
        extra={
            "length": len(raw),
            "progress_status": progress_status.name,
            "fault_code": f"{status.fault_event_code.raw_value:02X}",
        },
    )
    return status


def try_decode_detailed_status(
    data: bytes | bytearray | memoryview,
    *,
    constants: DeviceConstants = DEFAULT_CONSTANTS,
    classifier: FaultClassifier = DEFAULT_CLASSIFIER,
) -> DetailedStatus | None:
    try:
        return decode_detailed_status(data, constants=constants, classifier=classifier)
    except StatusDecodeError as exc:
        log.debug("Detailed status rejected", extra={"error": str(exc)})
        return None
