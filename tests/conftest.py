import pytest
import pytest_asyncio

import config
import database


@pytest_asyncio.fixture
async def db(tmp_path, monkeypatch):
    """임시 SQLite 파일로 테이블 생성"""
    monkeypatch.setattr(config, "DB_PATH", str(tmp_path / "test.db"))
    await database.init_database()
    yield config.DB_PATH


@pytest.fixture
def guild_id():
    return 111111111111111111
