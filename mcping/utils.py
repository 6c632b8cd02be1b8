import re
from typing import Any, Tuple

FORMATTING_RE = re.compile(r"§.")


def parse_address(address: str, default_port: int) -> Tuple[str, int]:
    """Split `host[:port]` into host and port, using `default_port` when the port is absent.

    IPv6 literals must be bracketed when a port is given (`[::1]:25565`)."""
    address = address.strip()
    if not address:
        raise ValueError("empty server address")
    if address.startswith("["):
        host, sep, rest = address[1:].partition("]")
        if not sep or not host:
            raise ValueError(f"invalid server address: {address}")
        port_str = rest[1:] if rest.startswith(":") else None
        if rest and port_str is None:
            raise ValueError(f"invalid server address: {address}")
    elif address.count(":") == 1:
        host, port_str = address.split(":", 1)
    else:
        # bare hostname, IPv4, or unbracketed IPv6 literal
        host, port_str = address, None
    if not port_str:
        return host, default_port
    if not port_str.isdigit() or not 0 < int(port_str) < 65536:
        raise ValueError(f"invalid port: {port_str}")
    return host, int(port_str)


def flatten_description(description: Any) -> str:
    "Collapse a chat component (string, dict with text/extra, or list) into plain text"
    if description is None:
        return ""
    if isinstance(description, str):
        return description
    if isinstance(description, list):
        return "".join(flatten_description(part) for part in description)
    if isinstance(description, dict):
        text = str(description.get("text", ""))
        extra = description.get("extra")
        if not isinstance(extra, list):
            return text
        return text + "".join(flatten_description(part) for part in extra)
    return str(description)


def clean_motd(motd: str) -> str:
    "Strip formatting codes and collapse runs of blanks"
    motd = FORMATTING_RE.sub("", motd)
    return re.sub(r"[ \t\r]{2,}", " ", motd).strip()
