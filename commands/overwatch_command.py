# commands/overwatch_command.py - /전적 명령어

import asyncio

import aiohttp
import discord
from discord import app_commands

from overwatch_api import (
    OverwatchError, is_valid_battletag, fetch_player_summary,
    build_player_embed, build_error_embed,
)


def overwatch_command(bot):

    @bot.tree.command(name="전적", description="오버워치 플레이어의 전적을 조회합니다")
    @app_commands.rename(battletag="배틀태그")
    @app_commands.describe(battletag="조회할 플레이어의 배틀태그 (예: 플레이어#1234)")
    async def slash_overwatch(interaction: discord.Interaction, battletag: str):
        battletag = battletag.strip()
        if not is_valid_battletag(battletag):
            embed = discord.Embed(
                title="❌ 오류",
                description="올바른 배틀태그 형식을 입력해주세요.\n예시: `플레이어#1234`",
                color=discord.Color.red()
            )
            await interaction.response.send_message(embed=embed, ephemeral=True)
            return

        await interaction.response.defer()
        try:
            player = await fetch_player_summary(battletag)
        except (OverwatchError, aiohttp.ClientError, asyncio.TimeoutError) as e:
            print(f"[Overwatch] 전적 조회 오류 ({battletag}): {e}")
            await interaction.followup.send(embed=build_error_embed(e))
            return

        await interaction.followup.send(embed=build_player_embed(player, battletag))
