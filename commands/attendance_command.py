# commands/attendance_command.py - /출석, /출석랭크 명령어

import discord

from attendance_manager import check_in, get_ranking, format_ranking_lines
from config import ATTENDANCE_RANK_LIMIT
from utils import now_kst, get_display_name


def attendance_command(bot):

    @bot.tree.command(name="출석", description="오늘 출석 체크를 합니다")
    @discord.app_commands.guild_only()
    async def slash_attendance(interaction: discord.Interaction):
        user = interaction.user
        name = get_display_name(user)

        try:
            result = await check_in(interaction.guild.id, user.id)
        except Exception as e:
            print(f"[Attendance] 출석 처리 오류: {e}")
            await interaction.response.send_message(
                "❌ 출석 처리 중 오류가 발생했습니다. 잠시 후 다시 시도해주세요.",
                ephemeral=True
            )
            return

        if result['already_checked']:
            embed = discord.Embed(
                title="📅 이미 출석했습니다",
                description=f"{name}님은 오늘 이미 출석하셨습니다!",
                color=discord.Color.orange(),
                timestamp=now_kst()
            )
        else:
            embed = discord.Embed(
                title="✅ 출석 완료",
                description=f"{name}님, 출석이 완료되었습니다!",
                color=discord.Color.green(),
                timestamp=now_kst()
            )
        embed.add_field(name="누적 출석", value=f"**{result['count']}일**", inline=True)
        embed.add_field(name="날짜", value=result['date'], inline=True)
        embed.set_thumbnail(url=user.display_avatar.url)
        await interaction.response.send_message(embed=embed)

    @bot.tree.command(name="출석랭크", description="서버 출석 랭킹을 확인합니다")
    @discord.app_commands.guild_only()
    async def slash_attendance_rank(interaction: discord.Interaction):
        try:
            ranking = await get_ranking(interaction.guild.id)
        except Exception as e:
            print(f"[Attendance] 랭킹 조회 오류: {e}")
            await interaction.response.send_message(
                "❌ 출석 랭킹을 불러오는 중 오류가 발생했습니다.",
                ephemeral=True
            )
            return

        if not ranking:
            embed = discord.Embed(
                title="📊 출석 랭킹",
                description="아직 출석한 사용자가 없습니다.",
                color=discord.Color.greyple()
            )
            await interaction.response.send_message(embed=embed)
            return

        embed = discord.Embed(
            title=f"📊 {interaction.guild.name} 출석 랭킹",
            description=format_ranking_lines(ranking, ATTENDANCE_RANK_LIMIT),
            color=discord.Color.gold(),
            timestamp=now_kst()
        )
        if len(ranking) > ATTENDANCE_RANK_LIMIT:
            embed.set_footer(text=f"외 {len(ranking) - ATTENDANCE_RANK_LIMIT}명이 더 있습니다.")
        await interaction.response.send_message(embed=embed)
