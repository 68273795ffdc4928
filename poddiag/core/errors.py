from __future__ import annotations


class StatusDecodeError(Exception):
    pass


class InsufficientData(StatusDecodeError):
    def __init__(self, length: int, required: int) -> None:
        super().__init__(f"not enough data: got {length} bytes, need at least {required}")
        self.length = int(length)
        self.required = int(required)


class UnknownEnumValue(StatusDecodeError):
    def __init__(self, field: str, raw: int) -> None:
        super().__init__(f"unknown {field} value 0x{int(raw) & 0xFF:02X}")
        self.field = field
        self.raw = int(raw) & 0xFF


class HexParseError(ValueError):
    pass
