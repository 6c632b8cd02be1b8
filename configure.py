import discord
import asyncio

varss = """PING_TIMEOUT = 5.0
# handshake protocol version; -1 lets the server pick
JAVA_PROTOCOL_VERSION = 47
"""

print("Welcome to mcping setup\nThis script will create config.py for you\n\n")

async def check_token(token: str) -> bool:
    try:
        client = discord.Client(intents=discord.Intents.none())

        @client.event
        async def on_ready():
            print(f"✅ Logged in as {client.user}")
            await client.close()

        await client.start(token)
        return True
    except discord.DiscordException as e:
        print(f"❌ Invalid token: {e}")
        return False

token = input("Please enter your Discord token: ")

if not asyncio.run(check_token(token)):
    raise SystemExit(1)

with open("config.py", "w", encoding="utf-8") as f:
    f.write(f'DISCORD_TOKEN = "{token}"\n\n')
    f.write(varss)

print("✅ config.py created successfully! Now run bot.py")
