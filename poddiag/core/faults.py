from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Mapping


class FaultEventType(IntEnum):
    NO_FAULTS = 0x00
    FAILED_FLASH_ERASE = 0x01
    FAILED_FLASH_STORE = 0x02
    TABLE_CORRUPTION_BASAL_SUBCOMMAND = 0x03
    CORRUPTION_BYTE_720 = 0x05
    DATA_CORRUPTION_IN_TEST_RTC_INTERRUPT = 0x06
    RTC_INTERRUPT_HANDLER_INCONSISTENT_STATE = 0x07
    VALUE_GREATER_THAN_8 = 0x08
    INVALID_BEACON_CONTROL_VALUE = 0x0A
    BF0_NOT_EQUAL_TO_BF1 = 0x0B
    TABLE_CORRUPTION_TEMP_BASAL_SUBCOMMAND = 0x0C
    RESET_DUE_TO_COP = 0x0D
    RESET_DUE_TO_ILLEGAL_OPCODE = 0x0E
    RESET_DUE_TO_ILLEGAL_ADDRESS = 0x0F
    RESET_DUE_TO_SAWCOP = 0x10
    CORRUPTION_IN_BYTE_866 = 0x11
    RESET_DUE_TO_LVD = 0x12
    MESSAGE_LENGTH_TOO_LONG = 0x13
    OCCLUDED = 0x14
    CORRUPTION_IN_WORD_129 = 0x15
    CORRUPTION_IN_BYTE_868 = 0x16
    CORRUPTION_IN_A_VALIDATED_TABLE = 0x17
    RESERVOIR_EMPTY = 0x18
    BAD_POWER_SWITCH_ARRAY_VALUE_1 = 0x19
    BAD_POWER_SWITCH_ARRAY_VALUE_2 = 0x1A
    BAD_LOAD_CNTH_VALUE = 0x1B
    EXCEEDED_MAXIMUM_POD_LIFE_80_HRS = 0x1C
    BAD_STATE_COMMAND_1A_SCHEDULE_PARSE = 0x1D
    UNEXPECTED_STATE_IN_REGISTER_UPON_RESET = 0x1E
    WRONG_SUMMARY_FOR_TABLE_129 = 0x1F
    VALIDATE_COUNT_ERROR_WHEN_BOLUSING = 0x20
    BAD_TIMER_VARIABLE_STATE = 0x21
    UNEXPECTED_RTC_MODULE_VALUE_DURING_RESET = 0x22
    PROBLEM_CALIBRATE_TIMER = 0x23
    RTC_INTERRUPT_HANDLER_UNEXPECTED_CALL = 0x26
    MISSING_2_HOUR_ALERT_TO_FILL_TANK = 0x27
    FAULT_EVENT_SETUP_POD = 0x28
    AUTO_OFF_0 = 0x29
    AUTO_OFF_1 = 0x2A
    AUTO_OFF_2 = 0x2B
    AUTO_OFF_3 = 0x2C
    AUTO_OFF_4 = 0x2D
    AUTO_OFF_5 = 0x2E
    AUTO_OFF_6 = 0x2F
    AUTO_OFF_7 = 0x30
    INSULIN_DELIVERY_COMMAND_ERROR = 0x31
    BAD_VALUE_STARTUP_TEST = 0x32
    CONNECTED_POD_COMMAND_TIMEOUT = 0x33
    RESET_FROM_UNKNOWN_CAUSE = 0x34
    VETO_NOT_SET = 0x36
    ERROR_FLASH_INITIALIZATION = 0x37
    BAD_PIEZO_VALUE = 0x38
    UNEXPECTED_VALUE_BYTE_358 = 0x39
    PROBLEM_WITH_LOAD_1_AND_2 = 0x3A
    A_GREATER_THAN_7_IN_MESSAGE = 0x3B
    FAILED_TEST_SAW_RESET = 0x3C
    TEST_IN_PROGRESS = 0x3D
    PROBLEM_WITH_PUMP_ANCHOR = 0x3E
    ERROR_FLASH_WRITE = 0x3F
    ENCODER_COUNT_TOO_HIGH = 0x40
    ENCODER_COUNT_EXCESSIVE_VARIANCE = 0x41
    ENCODER_COUNT_TOO_LOW = 0x42
    ENCODER_COUNT_PROBLEM = 0x43
    CHECK_VOLTAGE_OPEN_WIRE_1 = 0x44
    CHECK_VOLTAGE_OPEN_WIRE_2 = 0x45
    PROBLEM_WITH_LOAD_1_AND_2_TYPE_46 = 0x46
    PROBLEM_WITH_LOAD_1_AND_2_TYPE_47 = 0x47
    BAD_TIMER_CALIBRATION = 0x48
    BAD_TIMER_RATIOS = 0x49
    BAD_TIMER_VALUES = 0x4A
    TRIM_ICS_TOO_CLOSE_TO_0X1FF = 0x4B
    PROBLEM_FINDING_BEST_TRIM_VALUE = 0x4C
    BAD_SET_TPM1_MULTI_CASES_VALUE = 0x4D
    SAW_TRIM_ERROR = 0x4E
    UNEXPECTED_RF_ERROR_FLAG_DURING_RESET = 0x4F
    TIMER_PULSE_WIDTH_MODULATOR_OVERFLOW = 0x50
    TICKCNT_ERROR = 0x51
    BAD_RFM_XTAL_START = 0x52
    BAD_RX_SENSITIVITY = 0x53
    PACKET_FRAME_LENGTH_TOO_LONG = 0x54
    UNEXPECTED_IRQ_HIGH_IN_TIMER_TICK = 0x55
    UNEXPECTED_IRQ_LOW_IN_TIMER_TICK = 0x56
    BAD_ARG_TO_GET_ENTRY = 0x57
    BAD_ARG_TO_UPDATE_37A_TABLE = 0x58
    ERROR_UPDATING_37A_TABLE = 0x59
    OCCLUSION_CHECK_VALUE_TOO_HIGH = 0x5A
    LOAD_TABLE_CORRUPTION = 0x5B
    PRIME_OPEN_COUNT_TOO_LOW = 0x5C
    BAD_VALUE_BYTE_109 = 0x5D
    DISABLE_FLASH_SECURITY_FAILED = 0x5E
    CHECK_VOLTAGE_FAILURE = 0x5F
    OCCLUSION_CHECK_STARTUP_1 = 0x60
    OCCLUSION_CHECK_STARTUP_2 = 0x61
    OCCLUSION_CHECK_TIMEOUTS_1 = 0x62
    OCCLUSION_CHECK_TIMEOUTS_2 = 0x66
    OCCLUSION_CHECK_TIMEOUTS_3 = 0x67
    OCCLUSION_CHECK_PULSE_ISSUE = 0x68
    OCCLUSION_CHECK_BOLUS_PROBLEM = 0x69
    OCCLUSION_CHECK_ABOVE_THRESHOLD = 0x6A
    BASAL_UNDER_INFUSION = 0x80
    BASAL_OVER_INFUSION = 0x81
    TEMP_BASAL_UNDER_INFUSION = 0x82
    TEMP_BASAL_OVER_INFUSION = 0x83
    BOLUS_UNDER_INFUSION = 0x84
    BOLUS_OVER_INFUSION = 0x85
    BASAL_OVER_INFUSION_PULSE = 0x86
    TEMP_BASAL_OVER_INFUSION_PULSE = 0x87
    BOLUS_OVER_INFUSION_PULSE = 0x88
    IMMEDIATE_BOLUS_OVER_INFUSION_PULSE = 0x89
    EXTENDED_BOLUS_OVER_INFUSION_PULSE = 0x8A
    CORRUPTION_OF_TABLES = 0x8B
    UNRECOGNIZED_PULSE = 0x8D
    SYNC_WITHOUT_TEMP_ACTIVE = 0x8E
    COMMAND_1A_PARSE_UNEXPECTED_FAILED = 0x8F
    ILLEGAL_CHAN_PARAM = 0x90
    BASAL_PULSE_CHAN_INACTIVE = 0x91
    TEMP_PULSE_CHAN_INACTIVE = 0x92
    BOLUS_PULSE_CHAN_INACTIVE = 0x93
    INT_SEMAPHORE_NOT_SET = 0x94
    ILLEGAL_INTER_LOCK_CHAN = 0x95
    BAD_STATE_IN_CLEAR_BOLUS_IST2_AND_VARS = 0x96
    BAD_STATE_IN_MAYBE_INC_33D = 0x97
    BLE_TIMEOUT = 0xA9
    BLE_INITIATED = 0xAA
    BLE_UNK_ALARM = 0xAB
    BLE_IAAS = 0xAC
    CRC_FAILURE = 0xAD
    BLE_WD_PING_TIMEOUT = 0xAE
    BLE_EXCESSIVE_RESETS = 0xAF
    BLE_NAK_ERROR = 0xB0
    BLE_REQ_HIGH_TIMEOUT = 0xB1
    BLE_UNKNOWN_RESP = 0xB2
    BLE_REQ_STUCK_HIGH = 0xB3
    BLE_STATE_MACHINE_1 = 0xB4
    BLE_STATE_MACHINE_2 = 0xB5
    BLE_ARB_LOST = 0xB6
    BLE_ER48_DUAL_NACK = 0xB7
    BLE_QN_EXCEED_MAX_RETRY = 0xB8
    BLE_QN_CRIT_VAR_FAIL = 0xB9

    @property
    def description(self) -> str:
        return self.name.replace("_", " ").lower()


@dataclass(frozen=True)
class FaultEventCode:
    """Raw fault byte together with its classified fault type.

    ``fault_type`` is None for bytes the classification table does not list.
    """

    raw_value: int
    fault_type: FaultEventType | None

    @property
    def is_no_faults(self) -> bool:
        return self.fault_type is FaultEventType.NO_FAULTS

    @property
    def description(self) -> str:
        name = self.fault_type.description if self.fault_type is not None else "unknown fault"
        return f"Fault Event Code 0x{self.raw_value:02X}: {name}"

    def to_dict(self) -> dict[str, object]:
        return {
            "raw": self.raw_value,
            "type": self.fault_type.name if self.fault_type is not None else None,
            "description": self.description,
        }


class FaultClassifier:
    """Classify raw fault bytes.

    The device's own table is used unless ``overrides`` maps a raw byte to a
    different fault type.
    """

    def __init__(self, overrides: Mapping[int, FaultEventType] | None = None) -> None:
        self._overrides: dict[int, FaultEventType] = {}
        for raw, fault_type in (overrides or {}).items():
            self._overrides[int(raw) & 0xFF] = FaultEventType(fault_type)

    def classify(self, raw: int) -> FaultEventCode:
        value = int(raw) & 0xFF
        fault_type = self._overrides.get(value)
        if fault_type is None:
            try:
                fault_type = FaultEventType(value)
            except ValueError:
                fault_type = None
        return FaultEventCode(raw_value=value, fault_type=fault_type)


DEFAULT_CLASSIFIER = FaultClassifier()
