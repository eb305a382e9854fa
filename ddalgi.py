# ddalgi.py - Main

r'''

        \|/
      .-'^'-.
     / .  .  \
    |  . .  . |
     \  .  . /
      '-._.-'    딸기봇

'''
import discord
from discord import app_commands
from discord.ext import commands

from config import DISCORD_TOKEN, BAD_WORD_FILTER_ENABLED
from database import init_database
from logger import send_error_log
from music_player import setup_music_player
from word_filter import contains_bad_word, WARNING_MESSAGE
from commands.attendance_command import attendance_command
from commands.lotto_command import lotto_command
from commands.league_command import league_command, handle_banpick_dm
from commands.music_command import music_command
from commands.overwatch_command import overwatch_command
from commands.steam_command import steam_command
from commands.team_shuffle_command import team_shuffle_command

# Permission - Intents
intents = discord.Intents.default()
intents.guilds = True
intents.voice_states = True
intents.messages = True
intents.members = True
intents.message_content = True
intents.dm_messages = True

bot = commands.Bot(command_prefix='!', intents=intents)

# modules
attendance_command(bot)
lotto_command(bot)
league_command(bot)
music_command(bot)
overwatch_command(bot)
steam_command(bot)
team_shuffle_command(bot)
setup_music_player(bot)


# onEnable
@bot.event
async def on_ready():
    print(f"Logged in as {bot.user}")

    # 데이터베이스 초기화
    await init_database()
    print("[Database] Database initialized")

    # Slash 명령어 동기화
    synced = await bot.tree.sync()
    print(f"[Commands] {len(synced)}개의 슬래시 명령어 동기화 완료")

    print("딸기봇이 준비되었습니다!")


@bot.event
async def on_message(message: discord.Message):
    if message.author.bot:
        return

    # DM: 밴픽 입력
    if message.guild is None:
        try:
            await handle_banpick_dm(bot, message)
        except Exception as e:
            print(f"[Banpick] DM 처리 오류: {e}")
            await send_error_log(bot, "밴픽 DM 처리", e)
        return

    if BAD_WORD_FILTER_ENABLED and contains_bad_word(message.content):
        await message.reply(WARNING_MESSAGE)

    await bot.process_commands(message)


@bot.tree.error
async def on_app_command_error(interaction: discord.Interaction, error: app_commands.AppCommandError):
    if isinstance(error, app_commands.NoPrivateMessage):
        text = "❌ 이 명령어는 서버에서만 사용할 수 있습니다."
    elif isinstance(error, app_commands.MissingPermissions):
        text = "❌ 이 명령어를 사용할 권한이 없습니다."
    else:
        command_name = interaction.command.qualified_name if interaction.command else "알 수 없음"
        print(f"[Commands] /{command_name} 실행 오류: {error}")
        await send_error_log(bot, f"/{command_name}", error, interaction.guild)
        text = "❌ 명령어 실행 중 오류가 발생했습니다. 잠시 후 다시 시도해주세요."

    if interaction.response.is_done():
        await interaction.followup.send(text, ephemeral=True)
    else:
        await interaction.response.send_message(text, ephemeral=True)


#running
bot.run(DISCORD_TOKEN)
