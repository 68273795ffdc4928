from __future__ import annotations


def read_u8(data: bytes, offset: int) -> int:
    return int(data[offset]) & 0xFF


def read_u16be(data: bytes, offset: int) -> int:
    return int.from_bytes(data[offset : offset + 2], byteorder="big", signed=False)


def read_u10(data: bytes, offset: int) -> int:
    # Low 2 bits of the first byte are the high bits of the value.
    return ((int(data[offset]) & 0x3) << 8) | (int(data[offset + 1]) & 0xFF)


def read_bits(data: bytes, offset: int, mask: int, shift: int = 0) -> int:
    return (int(data[offset]) & int(mask)) >> int(shift)
