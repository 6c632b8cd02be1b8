import asyncio, logging, random, struct, time
from typing import Optional

from mcping.errors import InvalidPacketId, MalformedStatusPayload, PingConnectionError, PingError, PingTimeout
from mcping.resolver import Resolver
from mcping.status import BedrockStatus

logger = logging.getLogger(__name__)

DEFAULT_PORT = 19132
PING_TIMEOUT = 5.0

UNCONNECTED_PING_ID = 0x01
UNCONNECTED_PONG_ID = 0x1C
MAGIC = bytes.fromhex("00ffff00fefefefefdfdfdfd12345678")
# server GUID, echoed magic and the string length prefix, skipped as one block
PONG_HEADER_SKIP = 34
PONG_FIELDS = 12
MAX_DATAGRAM = 2048


def now_ms() -> int:
    return int(time.time() * 1000)


def build_unconnected_ping(timestamp_ms: int, client_guid: int) -> bytes:
    return (struct.pack(">BQ", UNCONNECTED_PING_ID, timestamp_ms)
            + MAGIC + struct.pack(">Q", client_guid))


def _int_field(fields, index: int, name: str) -> int:
    try:
        return int(fields[index], 10)
    except ValueError:
        raise MalformedStatusPayload(f"{name} is not a number: {fields[index]!r}") from None


def parse_unconnected_pong(data: bytes, received_ms: Optional[int] = None) -> BedrockStatus:
    """Parse an unconnected pong datagram.

    Latency is `received_ms` minus the timestamp echoed at offset 1."""
    if not data:
        raise MalformedStatusPayload("empty datagram")
    if data[0] != UNCONNECTED_PONG_ID:
        raise InvalidPacketId(UNCONNECTED_PONG_ID, data[0])
    if len(data) < 1 + PONG_HEADER_SKIP:
        raise MalformedStatusPayload(f"pong is {len(data)} bytes, shorter than its header")
    if received_ms is None:
        received_ms = now_ms()
    (sent_ms,) = struct.unpack_from(">Q", data, 1)
    try:
        text = data[1 + PONG_HEADER_SKIP:].decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedStatusPayload(f"server info is not UTF-8: {e}") from e
    fields = text.split(";")
    if len(fields) == PONG_FIELDS + 1 and fields[-1] == "":
        fields.pop()
    if len(fields) != PONG_FIELDS:
        raise MalformedStatusPayload(f"expected {PONG_FIELDS} server info fields, got {len(fields)}")
    return BedrockStatus(
        edition=fields[0],
        motd=fields[1],
        protocol=_int_field(fields, 2, "protocol"),
        version_name=fields[3],
        players_online=_int_field(fields, 4, "players online"),
        players_max=_int_field(fields, 5, "players max"),
        server_id=fields[6],
        world_name=fields[7],
        game_mode=fields[8],
        nintendo_limited=_int_field(fields, 9, "nintendo limited") != 0,
        port_ipv4=_int_field(fields, 10, "IPv4 port"),
        port_ipv6=_int_field(fields, 11, "IPv6 port"),
        latency_ms=received_ms - sent_ms,
    )


class BedrockPingProtocol(asyncio.DatagramProtocol):
    "Sends one unconnected ping and settles `result` with the first datagram that comes back"

    def __init__(self, client_guid: Optional[int] = None):
        self.client_guid = random.getrandbits(63) if client_guid is None else client_guid
        self.result: asyncio.Future = asyncio.get_running_loop().create_future()
        self.transport: Optional[asyncio.DatagramTransport] = None

    def connection_made(self, transport):
        self.transport = transport
        transport.sendto(build_unconnected_ping(now_ms(), self.client_guid))

    def datagram_received(self, data, addr):
        if self.result.done():
            return
        try:
            self.result.set_result(parse_unconnected_pong(data))
        except PingError as e:
            self.result.set_exception(e)

    def error_received(self, exc):
        if not self.result.done():
            self.result.set_exception(PingConnectionError(f"{type(exc).__name__}: {exc}"))

    def connection_lost(self, exc):
        if not self.result.done():
            self.result.set_exception(PingConnectionError("socket closed before a pong arrived"))


async def ping_bedrock(host: str, port: int = DEFAULT_PORT, *,
                       timeout: float = PING_TIMEOUT,
                       resolver: Optional[Resolver] = None) -> BedrockStatus:
    if resolver is not None:
        host, port = await resolver(host, port)
    loop = asyncio.get_running_loop()
    try:
        transport, protocol = await loop.create_datagram_endpoint(
            BedrockPingProtocol, remote_addr=(host, port))
    except OSError as e:
        raise PingConnectionError(f"{host}:{port}: {type(e).__name__}: {e}") from e
    logger.debug("Sent unconnected ping to %s:%d", host, port)
    try:
        return await asyncio.wait_for(protocol.result, timeout=timeout)
    except asyncio.TimeoutError:
        raise PingTimeout(f"no pong from {host}:{port} within {timeout}s") from None
    finally:
        transport.close()
