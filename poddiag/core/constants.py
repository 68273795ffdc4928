from __future__ import annotations

from dataclasses import dataclass

# Pod info subtype carried in byte 0 of a detailed status record.
POD_INFO_TYPE_DETAILED_STATUS = 0x02

DETAILED_STATUS_MIN_LENGTH = 21

# Reservoir value reported by the PDM when the pod reads above its maximum.
RESERVOIR_UNKNOWN_RR = 51


@dataclass(frozen=True)
class DeviceConstants:
    pulse_size: float = 0.05
    maximum_reservoir_reading: float = 50.0

    def __post_init__(self) -> None:
        if not float(self.pulse_size) > 0:
            raise ValueError("pulse_size must be positive")
        if float(self.maximum_reservoir_reading) < 0:
            raise ValueError("maximum_reservoir_reading must not be negative")


DEFAULT_CONSTANTS = DeviceConstants()
