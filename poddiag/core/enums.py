from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator

from poddiag.core.errors import UnknownEnumValue


class PodProgressStatus(IntEnum):
    INITIALIZED = 0
    MEMORY_INITIALIZED = 1
    REMINDER_INITIALIZED = 2
    PAIRING_COMPLETED = 3
    PRIMING = 4
    PRIMING_COMPLETED = 5
    BASAL_INITIALIZED = 6
    INSERTING_CANNULA = 7
    ABOVE_FIFTY_UNITS = 8
    FIFTY_OR_LESS_UNITS = 9
    ONE_NOT_USED_BUT_IN_33 = 10
    TWO_NOT_USED_BUT_IN_33 = 11
    THREE_NOT_USED_BUT_IN_33 = 12
    FAULT_EVENT_OCCURRED = 13
    ACTIVATION_TIME_EXCEEDED = 14
    INACTIVE = 15

    @classmethod
    def from_raw(cls, raw: int, *, field: str = "PodProgressStatus") -> PodProgressStatus:
        return _lookup(cls, raw, field)

    @property
    def ready_for_delivery(self) -> bool:
        return PodProgressStatus.ABOVE_FIFTY_UNITS <= self <= PodProgressStatus.FIFTY_OR_LESS_UNITS

    @property
    def description(self) -> str:
        return _PROGRESS_TEXT[self]


_PROGRESS_TEXT: dict[PodProgressStatus, str] = {
    PodProgressStatus.INITIALIZED: "Initialized",
    PodProgressStatus.MEMORY_INITIALIZED: "Memory initialized",
    PodProgressStatus.REMINDER_INITIALIZED: "Reminder initialized",
    PodProgressStatus.PAIRING_COMPLETED: "Pairing completed",
    PodProgressStatus.PRIMING: "Priming",
    PodProgressStatus.PRIMING_COMPLETED: "Priming completed",
    PodProgressStatus.BASAL_INITIALIZED: "Basal initialized",
    PodProgressStatus.INSERTING_CANNULA: "Inserting cannula",
    PodProgressStatus.ABOVE_FIFTY_UNITS: "Normal",
    PodProgressStatus.FIFTY_OR_LESS_UNITS: "Low reservoir",
    PodProgressStatus.ONE_NOT_USED_BUT_IN_33: "oneNotUsedButin33",
    PodProgressStatus.TWO_NOT_USED_BUT_IN_33: "twoNotUsedButin33",
    PodProgressStatus.THREE_NOT_USED_BUT_IN_33: "threeNotUsedButin33",
    PodProgressStatus.FAULT_EVENT_OCCURRED: "Fault event occurred",
    PodProgressStatus.ACTIVATION_TIME_EXCEEDED: "Activation time exceeded",
    PodProgressStatus.INACTIVE: "Deactivated",
}


class DeliveryStatus(IntEnum):
    SUSPENDED = 0
    SCHEDULED_BASAL = 1
    TEMP_BASAL_RUNNING = 2
    PRIMING = 4
    BOLUS_IN_PROGRESS = 5
    BOLUS_AND_TEMP_BASAL = 6
    EXTENDED_BOLUS_RUNNING = 9
    EXTENDED_BOLUS_AND_TEMP_BASAL = 10

    @classmethod
    def from_raw(cls, raw: int, *, field: str = "DeliveryStatus") -> DeliveryStatus:
        return _lookup(cls, raw, field)

    @property
    def bolusing(self) -> bool:
        return self in {
            DeliveryStatus.BOLUS_IN_PROGRESS,
            DeliveryStatus.BOLUS_AND_TEMP_BASAL,
            DeliveryStatus.EXTENDED_BOLUS_RUNNING,
            DeliveryStatus.EXTENDED_BOLUS_AND_TEMP_BASAL,
        }

    @property
    def temp_basal_running(self) -> bool:
        return self in {
            DeliveryStatus.TEMP_BASAL_RUNNING,
            DeliveryStatus.BOLUS_AND_TEMP_BASAL,
            DeliveryStatus.EXTENDED_BOLUS_AND_TEMP_BASAL,
        }

    @property
    def description(self) -> str:
        return _DELIVERY_TEXT[self]


_DELIVERY_TEXT: dict[DeliveryStatus, str] = {
    DeliveryStatus.SUSPENDED: "Suspended",
    DeliveryStatus.SCHEDULED_BASAL: "Scheduled basal",
    DeliveryStatus.TEMP_BASAL_RUNNING: "Temp basal running",
    DeliveryStatus.PRIMING: "Priming",
    DeliveryStatus.BOLUS_IN_PROGRESS: "Bolusing",
    DeliveryStatus.BOLUS_AND_TEMP_BASAL: "Bolusing with temp basal",
    DeliveryStatus.EXTENDED_BOLUS_RUNNING: "Extended bolus running",
    DeliveryStatus.EXTENDED_BOLUS_AND_TEMP_BASAL: "Extended bolus running with temp basal",
}


class AlertSlot(IntEnum):
    SLOT0_AUTO_OFF = 0
    SLOT1_NOT_USED = 1
    SLOT2_SHUTDOWN_IMMINENT = 2
    SLOT3_EXPIRATION_REMINDER = 3
    SLOT4_LOW_RESERVOIR = 4
    SLOT5_SUSPEND_IN_PROGRESS = 5
    SLOT6_SUSPEND_ENDED = 6
    SLOT7_EXPIRED = 7

    @property
    def bitmask(self) -> int:
        return 1 << int(self)


@dataclass(frozen=True)
class AlertSet:
    """Unacknowledged alerts, one bit per alert slot."""

    raw_value: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "raw_value", int(self.raw_value) & 0xFF)

    @classmethod
    def from_slots(cls, slots: list[AlertSlot]) -> AlertSet:
        raw = 0
        for slot in slots:
            raw |= slot.bitmask
        return cls(raw)

    @property
    def slots(self) -> list[AlertSlot]:
        return [slot for slot in AlertSlot if self.raw_value & slot.bitmask]

    def __contains__(self, slot: object) -> bool:
        return isinstance(slot, AlertSlot) and bool(self.raw_value & slot.bitmask)

    def __iter__(self) -> Iterator[AlertSlot]:
        return iter(self.slots)

    def __len__(self) -> int:
        return len(self.slots)

    def __str__(self) -> str:
        if not self.raw_value:
            return "No alerts"
        return ", ".join(slot.name.lower() for slot in self.slots)


def _lookup(enum_cls, raw: int, field: str):
    value = int(raw)
    try:
        return enum_cls(value)
    except ValueError:
        raise UnknownEnumValue(field, value) from None
