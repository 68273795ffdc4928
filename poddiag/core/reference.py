from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from poddiag.core.constants import RESERVOIR_UNKNOWN_RR
from poddiag.core.enums import PodProgressStatus
from poddiag.core.faults import FaultEventType

if TYPE_CHECKING:
    from poddiag.core.status import DetailedStatus


NBSP = "\u00a0"
DEFAULT_LABEL = "Ref"


@dataclass(frozen=True)
class RefCategory:
    code: int
    name: str
    # Occlusion refs carry no VVV or FFF value.
    zero_fields: bool = False
    # Fixed digits used in place of the computed fields.
    literal: str | None = None


PUMP_ERROR = RefCategory(19, "pump error")
RAM = RefCategory(1, "RAM")
CLOCK = RefCategory(7, "clock")
PDM_FAULT = RefCategory(11, "PDM fault", literal="11-144-0018-00049")
PUMP_VOLUME = RefCategory(14, "pump volume")
PUMP_AUTO_OFF = RefCategory(15, "pump auto-off")
PUMP_EXPIRED = RefCategory(16, "pump expired")
PUMP_OCCLUSION = RefCategory(17, "pump occlusion", zero_fields=True)
PUMP_COMMUNICATIONS = RefCategory(20, "pump communications")


def _group(category: RefCategory, *fault_types: FaultEventType) -> dict[FaultEventType, RefCategory]:
    return {fault_type: category for fault_type in fault_types}


_CATEGORIES: dict[FaultEventType, RefCategory] = {
    **_group(
        RAM,
        FaultEventType.FAILED_FLASH_ERASE,
        FaultEventType.FAILED_FLASH_STORE,
        FaultEventType.TABLE_CORRUPTION_BASAL_SUBCOMMAND,
        FaultEventType.CORRUPTION_BYTE_720,
        FaultEventType.CORRUPTION_IN_WORD_129,
        FaultEventType.DISABLE_FLASH_SECURITY_FAILED,
    ),
    **_group(
        CLOCK,
        FaultEventType.BAD_TIMER_VARIABLE_STATE,
        FaultEventType.PROBLEM_CALIBRATE_TIMER,
        FaultEventType.RTC_INTERRUPT_HANDLER_UNEXPECTED_CALL,
        FaultEventType.TRIM_ICS_TOO_CLOSE_TO_0X1FF,
        FaultEventType.PROBLEM_FINDING_BEST_TRIM_VALUE,
        FaultEventType.BAD_SET_TPM1_MULTI_CASES_VALUE,
    ),
    FaultEventType.INSULIN_DELIVERY_COMMAND_ERROR: PDM_FAULT,
    FaultEventType.RESERVOIR_EMPTY: PUMP_VOLUME,
    **_group(
        PUMP_AUTO_OFF,
        FaultEventType.AUTO_OFF_0,
        FaultEventType.AUTO_OFF_1,
        FaultEventType.AUTO_OFF_2,
        FaultEventType.AUTO_OFF_3,
        FaultEventType.AUTO_OFF_4,
        FaultEventType.AUTO_OFF_5,
        FaultEventType.AUTO_OFF_6,
        FaultEventType.AUTO_OFF_7,
    ),
    FaultEventType.EXCEEDED_MAXIMUM_POD_LIFE_80_HRS: PUMP_EXPIRED,
    FaultEventType.OCCLUDED: PUMP_OCCLUSION,
    **_group(
        PUMP_COMMUNICATIONS,
        FaultEventType.BLE_TIMEOUT,
        FaultEventType.BLE_INITIATED,
        FaultEventType.BLE_UNK_ALARM,
        FaultEventType.BLE_IAAS,
        FaultEventType.CRC_FAILURE,
        FaultEventType.BLE_WD_PING_TIMEOUT,
        FaultEventType.BLE_EXCESSIVE_RESETS,
        FaultEventType.BLE_NAK_ERROR,
        FaultEventType.BLE_REQ_HIGH_TIMEOUT,
        FaultEventType.BLE_UNKNOWN_RESP,
        FaultEventType.BLE_REQ_STUCK_HIGH,
        FaultEventType.BLE_STATE_MACHINE_1,
        FaultEventType.BLE_STATE_MACHINE_2,
        FaultEventType.BLE_ARB_LOST,
        FaultEventType.BLE_ER48_DUAL_NACK,
        FaultEventType.BLE_QN_EXCEED_MAX_RETRY,
        FaultEventType.BLE_QN_CRIT_VAR_FAIL,
    ),
}


def ref_category(fault_type: FaultEventType | None) -> RefCategory:
    if fault_type is None:
        return PUMP_ERROR
    return _CATEGORIES.get(fault_type, PUMP_ERROR)


def fault_is_present(status: DetailedStatus) -> bool:
    if status.progress_status is PodProgressStatus.ACTIVATION_TIME_EXCEEDED:
        return True
    return not status.fault_event_code.is_no_faults


def reference_code(status: DetailedStatus, *, label: str = DEFAULT_LABEL) -> str | None:
    """Return the PDM style ``Ref: TT-VVVHH-IIIRR-FFF`` string, or None without a fault.

    TT is the category code, VVV the raw error event byte, HH the hour of day
    of the pod's active time, III the whole units delivered, RR the whole
    units left in the reservoir (51 when above the pod's maximum reading)
    and FFF the raw fault code.
    """

    fault = status.fault_event_code
    if fault.is_no_faults:
        return None

    category = ref_category(fault.fault_type)
    if category.literal is not None:
        return f"{label}:{NBSP}{category.literal}"

    vvv = status.data[17]
    fff = fault.raw_value
    if category.zero_fields:
        vvv = 0
        fff = 0
    hh = (int(status.time_active_minutes) // 60) % 24
    iii = _whole_units(status.total_insulin_delivered)
    rr = _whole_units(status.reservoir_level) if status.reservoir_level is not None else RESERVOIR_UNKNOWN_RR

    return f"{label}:{NBSP}{category.code:02d}-{vvv:03d}{hh:02d}-{iii:03d}{rr:02d}-{fff:03d}"


def _whole_units(value: float) -> int:
    # Pulse scaling is inexact in binary floating point.
    return int(float(value) + 1e-9)
