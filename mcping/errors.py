class PingError(Exception):
    "Base class of every error raised while querying a server"


class PingConnectionError(PingError, ConnectionError):
    "The transport could not connect, send, or was closed before the exchange finished"


class PingTimeout(PingError, TimeoutError):
    "No valid response arrived before the deadline"


class InvalidPacketId(PingError):
    def __init__(self, expected: int, received: int):
        super().__init__(f"expected packet id 0x{expected:02x}, got 0x{received:02x}")
        self.expected = expected
        self.received = received


class MalformedVarInt(PingError):
    "VarInt is too big, or the framing around it is corrupt"


class IncompleteVarInt(MalformedVarInt):
    "The buffer ended in the middle of a VarInt"


class MalformedStatusPayload(PingError):
    "The status JSON document or the pong fields could not be parsed"


class ResolutionFailure(PingError):
    "SRV lookup failed; callers fall back to the original target"
