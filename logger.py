# logger.py - 로그 시스템

import discord
from datetime import datetime
from config import LOG_CHANNEL_ID


async def send_command_log(bot, executor: discord.abc.User, command: str, guild: discord.Guild = None, details: str = ""):
    """
    명령어 실행 로그 전송
    """
    if LOG_CHANNEL_ID is None:
        return

    try:
        channel = bot.get_channel(LOG_CHANNEL_ID)
        if channel is None:
            print(f"[Logger] 로그 채널을 찾을 수 없습니다. (ID: {LOG_CHANNEL_ID})")
            return

        embed = discord.Embed(
            title="📝 명령어 실행 로그",
            color=discord.Color.blue(),
            timestamp=datetime.now()
        )

        embed.add_field(
            name="실행자",
            value=f"{executor.display_name} ({executor.mention})\nID: {executor.id}",
            inline=False
        )

        embed.add_field(
            name="명령어",
            value=f"`{command}`",
            inline=False
        )

        if guild:
            embed.add_field(
                name="서버",
                value=f"{guild.name} (ID: {guild.id})",
                inline=False
            )

        if details:
            embed.add_field(
                name="상세 정보",
                value=details,
                inline=False
            )

        await channel.send(embed=embed)
    except Exception as e:
        print(f"[Logger] 로그 전송 실패: {e}")


async def send_error_log(bot, source: str, error: Exception, guild: discord.Guild = None):
    """
    처리되지 않은 오류 로그 전송
    """
    if LOG_CHANNEL_ID is None:
        return

    try:
        channel = bot.get_channel(LOG_CHANNEL_ID)
        if channel is None:
            print(f"[Logger] 로그 채널을 찾을 수 없습니다. (ID: {LOG_CHANNEL_ID})")
            return

        embed = discord.Embed(
            title="⚠️ 오류 로그",
            color=discord.Color.red(),
            timestamp=datetime.now()
        )

        embed.add_field(name="발생 위치", value=source, inline=False)
        embed.add_field(
            name="오류",
            value=f"`{type(error).__name__}: {str(error)[:900]}`",
            inline=False
        )

        if guild:
            embed.add_field(
                name="서버",
                value=f"{guild.name} (ID: {guild.id})",
                inline=False
            )

        await channel.send(embed=embed)
    except Exception as e:
        print(f"[Logger] 오류 로그 전송 실패: {e}")
