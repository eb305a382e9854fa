# commands/steam_command.py - /스팀 명령어

import discord
from discord import app_commands

from steam_utils import fetch_steam_profile
from utils import now_kst

STEAM_COLOR = 0x426cf5
DIVIDER = "---------------------------------------"


def steam_command(bot):

    @bot.tree.command(name="스팀", description="스팀 게임 정보를 조회합니다")
    @app_commands.rename(steam_id="스팀아이디")
    @app_commands.describe(steam_id="스팀ID를 입력하세요")
    async def slash_steam(interaction: discord.Interaction, steam_id: str):
        await interaction.response.defer()
        try:
            profile = await fetch_steam_profile(steam_id)
        except Exception as e:
            print(f"[Steam] 조회 오류 ({steam_id}): {e}")
            await interaction.followup.send("오류가 발생했습니다. 다시 시도해주세요.")
            return

        embed = discord.Embed(title="당신의 스팀정보", color=STEAM_COLOR, timestamp=now_kst())
        embed.add_field(name="스팀아이디", value=steam_id, inline=False)
        embed.add_field(name="보유 게임 수", value=str(profile['game_count']), inline=False)
        for game in profile['games']:
            embed.add_field(name=DIVIDER, value=f"<{game['name']}>", inline=False)
            embed.add_field(name="플레이 시간", value=game['play_time'], inline=False)
            embed.add_field(name="최근 플레이 날짜", value=game['last_played'], inline=False)
        await interaction.followup.send(embed=embed)
