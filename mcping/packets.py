# packets.py
from typing import Iterator, NamedTuple, Optional, Tuple

from mcping.errors import IncompleteVarInt, MalformedVarInt
from mcping.varint import read_varint, write_varint


class Packet(NamedTuple):
    packet_id: int
    payload: bytes


class DecodedPacket(NamedTuple):
    packet_id: int
    payload: bytes
    consumed: int


def encode_packet(packet_id: int, payload: bytes = b"") -> bytes:
    data = write_varint(packet_id) + payload
    return write_varint(len(data)) + data


def try_decode_packet(buffer: bytes, offset: int = 0) -> Optional[DecodedPacket]:
    """Decode the packet starting at `offset`, or return None if it has not fully arrived yet.

    `consumed` counts the bytes from `offset` to the end of the packet. Truncated
    input is never an error; only corrupt framing raises MalformedVarInt."""
    try:
        length, start = read_varint(buffer, offset)
    except IncompleteVarInt:
        return None
    end = start + length
    if len(buffer) < end:
        return None
    if length == 0:
        raise MalformedVarInt("packet declares zero length")
    window = bytes(buffer[start:end])
    try:
        packet_id, id_end = read_varint(window)
    except IncompleteVarInt:
        raise MalformedVarInt("packet id overruns the declared packet length") from None
    return DecodedPacket(packet_id, window[id_end:], end - offset)


class PacketBuffer:
    "Receive buffer of a single connection"

    def __init__(self):
        self._data = bytearray()

    def __len__(self) -> int:
        return len(self._data)

    def feed(self, data: bytes):
        self._data += data

    def __iter__(self) -> Iterator[Packet]:
        while True:
            decoded = try_decode_packet(self._data)
            if decoded is None:
                return
            del self._data[:decoded.consumed]
            yield Packet(decoded.packet_id, decoded.payload)


def write_string(text: str) -> bytes:
    data = text.encode("utf-8")
    return write_varint(len(data)) + data


def read_string(buffer: bytes, offset: int = 0) -> Tuple[str, int]:
    length, start = read_varint(buffer, offset)
    end = start + length
    if len(buffer) < end:
        raise ValueError(f"string declares {length} bytes, {len(buffer) - start} available")
    return bytes(buffer[start:end]).decode("utf-8"), end
