import json, os
from typing import Optional

import discord
from discord import app_commands, Embed, Colour

from mcping.errors import PingError
from mcping.ping import Edition, ping_server
from mcping.status import BedrockStatus, JavaStatus, StatusResult
from mcping.utils import clean_motd, parse_address

MESSAGES_PATH = os.getenv("MESSAGES_JSON_PATH",
                          os.path.join(os.path.dirname(os.path.abspath(__file__)), "messages.json"))
with open(MESSAGES_PATH, "r", encoding="utf-8") as f:
    MSG = json.load(f)


def status_embed(address: str, result: StatusResult) -> Embed:
    embed = Embed(title=f"✅ {address}",
                  description=MSG["status.embed.ok.desc"].format(
                      version=result.version_name, online=result.players_online, mx=result.players_max),
                  colour=Colour.green())
    embed.add_field(name=MSG["status.embed.field_latency"], value=f"{result.latency_ms} ms", inline=True)
    embed.add_field(name=MSG["status.embed.field_protocol"], value=str(result.protocol), inline=True)
    if isinstance(result, JavaStatus) and result.player_sample:
        names = [discord.utils.escape_markdown(name) for name in result.player_sample[:20]]
        embed.add_field(name=MSG["status.embed.field_players"], value=", ".join(names), inline=False)
    if isinstance(result, BedrockStatus):
        embed.add_field(name=MSG["status.embed.field_world"], value=result.world_name or "-", inline=True)
        embed.add_field(name=MSG["status.embed.field_gamemode"], value=result.game_mode or "-", inline=True)
    motd = clean_motd(result.motd)
    if motd:
        embed.add_field(name="MOTD", value=f"```\n{motd[:150]}\n```", inline=False)
    embed.set_footer(text=MSG["status.embed.footer"].format(edition=result.edition))
    return embed


def error_embed(address: str, error: Exception) -> Embed:
    return Embed(title=f"❌ {address}",
                 description=MSG["status.embed.err.desc"].format(error=f"{type(error).__name__}: {error}"),
                 colour=Colour.red())


def with_port(address: str, port: Optional[int]) -> str:
    if not port:
        return address
    host, existing = parse_address(address, 0)
    if existing:
        raise ValueError(f"{address} already has a port, drop it or the port option")
    return f"[{host}]:{port}" if ":" in host else f"{host}:{port}"


async def query_embed(address: str, edition: Edition, timeout: float, protocol_version: int,
                      port: Optional[int] = None) -> Embed:
    try:
        target = with_port(address, port)
        result = await ping_server(target, edition, timeout=timeout, protocol_version=protocol_version)
    except (PingError, ValueError) as e:
        return error_embed(address, e)
    return status_embed(address, result)


def setup(tree, bot, timeout: float = 5.0, protocol_version: int = 47):
    @tree.command(name="java", description=MSG["java.description"])
    @app_commands.describe(address=MSG["java.describe.address"], port=MSG["common.describe.port"])
    async def java_cmd(inter: discord.Interaction, address: str,
                       port: Optional[int] = None):
        await inter.response.defer()
        await inter.followup.send(embed=await query_embed(address, Edition.JAVA, timeout, protocol_version, port))

    @tree.command(name="bedrock", description=MSG["bedrock.description"])
    @app_commands.describe(address=MSG["bedrock.describe.address"], port=MSG["common.describe.port"])
    async def bedrock_cmd(inter: discord.Interaction, address: str,
                          port: Optional[int] = None):
        await inter.response.defer()
        await inter.followup.send(embed=await query_embed(address, Edition.BEDROCK, timeout, protocol_version, port))
