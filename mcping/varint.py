import struct
from typing import Tuple

from mcping.errors import IncompleteVarInt, MalformedVarInt

MAX_VARINT_BYTES = 5


def write_varint(value: int) -> bytes:
    if value < 0:
        if value < -(1 << 31):
            raise ValueError(f"{value} does not fit in a 32-bit VarInt")
        value &= 0xFFFFFFFF
    elif value > 0xFFFFFFFF:
        raise ValueError(f"{value} does not fit in a 32-bit VarInt")
    out = b""
    while True:
        temp = value & 0b01111111
        value >>= 7
        if value != 0:
            out += struct.pack("B", temp | 0b10000000)
        else:
            out += struct.pack("B", temp)
            break
    return out


def read_varint(buffer: bytes, offset: int = 0) -> Tuple[int, int]:
    """Decode the VarInt starting at `offset`.

    Returns the value and the offset of the first byte after it. Raises
    IncompleteVarInt if the buffer ends before the last byte of the VarInt,
    MalformedVarInt if it runs longer than 5 bytes."""
    num_read, result = 0, 0
    while True:
        if offset >= len(buffer):
            raise IncompleteVarInt(f"buffer ended after {num_read} VarInt byte(s)")
        byte = buffer[offset]
        offset += 1
        result |= (byte & 0b01111111) << (7 * num_read)
        num_read += 1
        if (byte & 0b10000000) == 0:
            break
        if num_read >= MAX_VARINT_BYTES:
            raise MalformedVarInt("VarInt too big")
    return result, offset
