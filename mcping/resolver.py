import ipaddress
import logging
from typing import Awaitable, Callable, Optional, Tuple

import dns.asyncresolver
import dns.exception
import dns.resolver

from mcping.errors import ResolutionFailure

logger = logging.getLogger(__name__)

JAVA_SRV_SERVICE = "_minecraft._tcp"
DNS_TIMEOUT = 3.0

Target = Tuple[str, int]
Resolver = Callable[[str, int], Awaitable[Target]]


def is_ip_literal(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


async def lookup_srv(host: str, service: str = JAVA_SRV_SERVICE,
                     lifetime: float = DNS_TIMEOUT) -> Optional[Target]:
    """Query the `service` SRV record of `host`.

    Returns the target and port of the preferred record (lowest priority, then
    highest weight), or None if the domain publishes no such record. Any other
    resolver error is raised as ResolutionFailure."""
    try:
        resolver = dns.asyncresolver.Resolver()
        resolver.lifetime = lifetime
        answer = await resolver.resolve(f"{service}.{host}", "SRV")
    except (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer):
        return None
    except dns.exception.DNSException as e:
        raise ResolutionFailure(f"SRV lookup for {host} failed: {type(e).__name__}: {e}") from e
    records = sorted(answer, key=lambda r: (r.priority, -r.weight))
    if not records:
        return None
    best = records[0]
    target = str(best.target).rstrip(".")
    if not target:
        return None
    return target, int(best.port)


async def resolve_target(host: str, port: int, service: str = JAVA_SRV_SERVICE) -> Target:
    "Apply the SRV override of `host` if it has one; lookup failures keep the original target"
    if is_ip_literal(host):
        return host, port
    try:
        override = await lookup_srv(host, service)
    except ResolutionFailure as e:
        logger.warning("%s, using %s:%d", e, host, port)
        return host, port
    if override is None:
        logger.debug("No SRV record for %s, using %s:%d", host, host, port)
        return host, port
    logger.debug("Resolved SRV %s -> %s:%d", host, *override)
    return override
