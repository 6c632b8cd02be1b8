# ping.py
import enum, logging
from typing import Optional

from mcping import bedrock, java
from mcping.resolver import Resolver, resolve_target
from mcping.status import StatusResult
from mcping.utils import parse_address

logger = logging.getLogger("mcping")
logger.addHandler(logging.NullHandler())


class Edition(enum.Enum):
    JAVA = "java"
    BEDROCK = "bedrock"

    @property
    def default_port(self) -> int:
        return java.DEFAULT_PORT if self is Edition.JAVA else bedrock.DEFAULT_PORT


async def ping_server(address: str, edition: Edition = Edition.JAVA, *,
                      timeout: float = java.PING_TIMEOUT,
                      protocol_version: int = java.DEFAULT_PROTOCOL_VERSION,
                      resolver: Optional[Resolver] = None,
                      use_srv: bool = True) -> StatusResult:
    """Query the server at `host[:port]` and return its status with the measured latency.

    `resolver` may rewrite the target before connecting. Without one, Java
    targets are looked up as `_minecraft._tcp` SRV records unless `use_srv`
    is false; Bedrock targets are used as given."""
    edition = Edition(edition)
    host, port = parse_address(address, edition.default_port)
    if resolver is None and use_srv and edition is Edition.JAVA:
        resolver = resolve_target
    logger.debug("Pinging %s:%d (%s)", host, port, edition.value)
    if edition is Edition.JAVA:
        return await java.ping_java(host, port, protocol_version=protocol_version,
                                    timeout=timeout, resolver=resolver)
    return await bedrock.ping_bedrock(host, port, timeout=timeout, resolver=resolver)
