import asyncio, dataclasses, enum, logging, struct, time
from typing import Optional

from mcping.errors import MalformedStatusPayload, MalformedVarInt, PingConnectionError, PingError, PingTimeout
from mcping.packets import Packet, PacketBuffer, encode_packet, read_string, write_string
from mcping.resolver import Resolver, resolve_target
from mcping.status import JavaStatus, java_status_from_json, parse_java_status
from mcping.varint import write_varint

logger = logging.getLogger(__name__)

DEFAULT_PORT = 25565
DEFAULT_PROTOCOL_VERSION = 47
PING_TIMEOUT = 5.0

HANDSHAKE_ID = 0x00
STATUS_REQUEST_ID = 0x00
STATUS_RESPONSE_ID = 0x00
PING_ID = 0x01
PONG_ID = 0x01
NEXT_STATE_STATUS = 1


class JavaState(enum.Enum):
    CONNECTING = "connecting"
    HANDSHAKE_SENT = "handshake_sent"
    STATUS_REQUESTED = "status_requested"
    AWAITING_STATUS_RESPONSE = "awaiting_status_response"
    PING_SENT = "ping_sent"
    AWAITING_PONG = "awaiting_pong"
    DONE = "done"
    FAILED = "failed"


def handshake_packet(host: str, port: int, protocol_version: int = DEFAULT_PROTOCOL_VERSION) -> bytes:
    data = b""
    data += write_varint(protocol_version)
    data += write_string(host)
    data += struct.pack(">H", port)
    data += write_varint(NEXT_STATE_STATUS)
    return encode_packet(HANDSHAKE_ID, data)


class JavaStatusProtocol(asyncio.Protocol):
    """Handshake, status request, ping and pong over one TCP connection.

    Every transition is driven by a transport callback; the outcome is set on
    `result` (a JavaStatus, or the PingError that ended the exchange)."""

    def __init__(self, host: str, port: int, protocol_version: int = DEFAULT_PROTOCOL_VERSION):
        self.host = host
        self.port = port
        self.protocol_version = protocol_version
        self.state = JavaState.CONNECTING
        self.buffer = PacketBuffer()
        self.result: asyncio.Future = asyncio.get_running_loop().create_future()
        self.transport: Optional[asyncio.Transport] = None
        self._closed = False
        self._status: Optional[JavaStatus] = None
        self._ping_sent_ns = 0

    def connection_made(self, transport):
        self.transport = transport
        logger.debug("Connected to %s:%d", self.host, self.port)
        transport.write(handshake_packet(self.host, self.port, self.protocol_version))
        self.state = JavaState.HANDSHAKE_SENT
        transport.write(encode_packet(STATUS_REQUEST_ID))
        self.state = JavaState.STATUS_REQUESTED
        self.state = JavaState.AWAITING_STATUS_RESPONSE

    def data_received(self, data):
        if self.result.done():
            return
        self.buffer.feed(data)
        try:
            for packet in self.buffer:
                self._dispatch(packet)
                if self.result.done():
                    break
        except PingError as e:
            self._fail(e)

    def connection_lost(self, exc):
        self._closed = True
        if not self.result.done():
            reason = f"{type(exc).__name__}: {exc}" if exc else "closed by peer"
            message = f"connection to {self.host}:{self.port} lost while {self.state.value}: {reason}"
            self.state = JavaState.FAILED
            self.result.set_exception(PingConnectionError(message))

    def _dispatch(self, packet: Packet):
        if self.state is JavaState.AWAITING_STATUS_RESPONSE and packet.packet_id == STATUS_RESPONSE_ID:
            self._on_status_response(packet.payload)
        elif self.state is JavaState.AWAITING_PONG and packet.packet_id == PONG_ID:
            self._on_pong()
        else:
            logger.debug("Ignoring packet 0x%02x from %s:%d in state %s",
                         packet.packet_id, self.host, self.port, self.state.value)

    def _on_status_response(self, payload: bytes):
        try:
            document, _ = read_string(payload)
        except (MalformedVarInt, ValueError) as e:
            raise MalformedStatusPayload(f"invalid status string: {e}") from e
        obj = parse_java_status(document)
        try:
            self._status = java_status_from_json(obj, latency_ms=0)
        except (TypeError, AttributeError) as e:
            raise MalformedStatusPayload(f"unexpected status JSON shape: {e}") from e
        self.state = JavaState.PING_SENT
        self._ping_sent_ns = time.perf_counter_ns()
        self.transport.write(encode_packet(PING_ID, struct.pack(">q", int(time.time() * 1000))))
        self.state = JavaState.AWAITING_PONG

    def _on_pong(self):
        latency = round((time.perf_counter_ns() - self._ping_sent_ns) / 1_000_000)
        self.state = JavaState.DONE
        self.close()
        self.result.set_result(dataclasses.replace(self._status, latency_ms=latency))

    def _fail(self, exc: PingError):
        self.state = JavaState.FAILED
        self.close()
        if not self.result.done():
            self.result.set_exception(exc)

    def close(self):
        if self._closed or self.transport is None:
            return
        self._closed = True
        self.transport.close()


async def ping_java(host: str, port: int = DEFAULT_PORT, *,
                    protocol_version: int = DEFAULT_PROTOCOL_VERSION,
                    timeout: float = PING_TIMEOUT,
                    resolver: Optional[Resolver] = resolve_target) -> JavaStatus:
    if resolver is not None:
        host, port = await resolver(host, port)

    async def exchange() -> JavaStatus:
        loop = asyncio.get_running_loop()
        _, protocol = await loop.create_connection(
            lambda: JavaStatusProtocol(host, port, protocol_version), host, port)
        try:
            return await protocol.result
        finally:
            protocol.close()

    try:
        return await asyncio.wait_for(exchange(), timeout=timeout)
    except asyncio.TimeoutError:
        raise PingTimeout(f"no status from {host}:{port} within {timeout}s") from None
    except PingError:
        raise
    except OSError as e:
        raise PingConnectionError(f"{host}:{port}: {type(e).__name__}: {e}") from e
