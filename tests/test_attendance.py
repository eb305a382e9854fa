import re

from attendance_manager import (
    check_in, get_ranking, get_current_date, get_rank_badge, format_ranking_lines,
)


def test_current_date_format():
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}", get_current_date())


async def test_first_check_in(db, guild_id):
    result = await check_in(guild_id, 1, today="2024-05-01")
    assert result == {'already_checked': False, 'count': 1, 'date': "2024-05-01"}


async def test_same_day_check_in_is_rejected(db, guild_id):
    await check_in(guild_id, 1, today="2024-05-01")
    result = await check_in(guild_id, 1, today="2024-05-01")
    assert result['already_checked'] is True
    assert result['count'] == 1


async def test_next_day_increments(db, guild_id):
    await check_in(guild_id, 1, today="2024-05-01")
    result = await check_in(guild_id, 1, today="2024-05-02")
    assert result['already_checked'] is False
    assert result['count'] == 2


async def test_ranking_sorted_by_count(db, guild_id):
    for day in ("2024-05-01", "2024-05-02", "2024-05-03"):
        await check_in(guild_id, 1, today=day)
    await check_in(guild_id, 2, today="2024-05-01")
    for day in ("2024-05-01", "2024-05-02"):
        await check_in(guild_id, 3, today=day)
    await check_in(999, 4, today="2024-05-01")

    ranking = await get_ranking(guild_id)
    assert [entry['user_id'] for entry in ranking] == [1, 3, 2]
    assert ranking[0]['last_date'] == "2024-05-03"


def test_rank_badges():
    assert [get_rank_badge(i) for i in range(7)] == ["🥇", "🥈", "🥉", "⭐", "⭐", "6.", "7."]


def test_ranking_lines_limited():
    ranking = [{'user_id': i, 'count': 20 - i, 'last_date': "2024-05-01"} for i in range(12)]
    lines = format_ranking_lines(ranking, 10).split("\n")
    assert len(lines) == 10
    assert lines[0].startswith("🥇 <@0>")
    assert "**20일**" in lines[0]
    assert lines[9].startswith("10.")
