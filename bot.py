from discord.ext import commands
from discord import Intents
import discord
import config
import bot_commands
from discord import Activity, ActivityType

INTENTS = Intents.default()

bot = commands.Bot(command_prefix="!", intents=INTENTS)
tree = bot.tree

bot_commands.setup(tree, bot,
                   timeout=getattr(config, "PING_TIMEOUT", 5.0),
                   protocol_version=getattr(config, "JAVA_PROTOCOL_VERSION", 47))


@bot.event
async def on_ready():
    await tree.sync()
    print(f"✅ Logged in as {bot.user} (id={bot.user.id})")
    await bot.change_presence(activity=Activity(type=ActivityType.playing, name=bot_commands.MSG["common.ready"]))

if __name__ == "__main__":
    discord.utils.setup_logging()
    bot.run(config.DISCORD_TOKEN, log_handler=None)
