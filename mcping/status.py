import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from mcping.errors import MalformedStatusPayload
from mcping.utils import flatten_description


@dataclass(frozen=True)
class StatusResult:
    edition: str
    version_name: str
    motd: str
    protocol: int
    players_online: int
    players_max: int
    latency_ms: int
    server_id: Optional[str] = None
    game_mode: Optional[str] = None


@dataclass(frozen=True)
class JavaStatus(StatusResult):
    favicon: Optional[str] = None
    player_sample: Tuple[str, ...] = ()
    raw: Dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class BedrockStatus(StatusResult):
    world_name: str = ""
    nintendo_limited: bool = False
    port_ipv4: Optional[int] = None
    port_ipv6: Optional[int] = None


def parse_java_status(document: str) -> Dict[str, Any]:
    "Decode the status response JSON; anything but a JSON object is malformed"
    try:
        obj = json.loads(document)
    except ValueError as e:
        raise MalformedStatusPayload(f"invalid status JSON: {e}") from e
    if not isinstance(obj, dict):
        raise MalformedStatusPayload(f"status JSON is a {type(obj).__name__}, not an object")
    return obj


def java_status_from_json(obj: Dict[str, Any], latency_ms: int) -> JavaStatus:
    version = obj.get("version") or {}
    players = obj.get("players") or {}
    if not isinstance(version, dict) or not isinstance(players, dict):
        raise MalformedStatusPayload("status JSON 'version' and 'players' must be objects")
    try:
        protocol = int(version.get("protocol", -1))
        online = int(players.get("online", 0))
        maxp = int(players.get("max", 0))
    except (TypeError, ValueError) as e:
        raise MalformedStatusPayload(f"invalid status fields: {e}") from e
    sample = players.get("sample")
    if not isinstance(sample, list):
        sample = []
    names = tuple(str(p.get("name", "")) for p in sample if isinstance(p, dict))
    return JavaStatus(
        edition="java",
        version_name=str(version.get("name", "-")),
        motd=flatten_description(obj.get("description", "")),
        protocol=protocol,
        players_online=online,
        players_max=maxp,
        latency_ms=latency_ms,
        favicon=obj.get("favicon"),
        player_sample=names,
        raw=obj,
    )
