from __future__ import annotations

from poddiag.core.constants import DEFAULT_CONSTANTS, DeviceConstants
from poddiag.core.enums import AlertSet, AlertSlot, DeliveryStatus, PodProgressStatus
from poddiag.core.errors import InsufficientData, StatusDecodeError, UnknownEnumValue
from poddiag.core.faults import FaultClassifier, FaultEventCode, FaultEventType
from poddiag.core.format import debug_description, format_duration
from poddiag.core.reference import RefCategory, fault_is_present, ref_category, reference_code
from poddiag.core.status import (
    DetailedStatus,
    ErrorEventInfo,
    decode_detailed_status,
    decode_error_event,
    try_decode_detailed_status,
)

__all__ = [
    "AlertSet",
    "AlertSlot",
    "DEFAULT_CONSTANTS",
    "DeliveryStatus",
    "DetailedStatus",
    "DeviceConstants",
    "ErrorEventInfo",
    "FaultClassifier",
    "FaultEventCode",
    "FaultEventType",
    "InsufficientData",
    "PodProgressStatus",
    "RefCategory",
    "StatusDecodeError",
    "UnknownEnumValue",
    "debug_description",
    "decode_detailed_status",
    "decode_error_event",
    "fault_is_present",
    "format_duration",
    "ref_category",
    "reference_code",
    "try_decode_detailed_status",
]
