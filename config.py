# config.py - 설정 파일

import os
from dotenv import load_dotenv

load_dotenv()

# .env
DISCORD_TOKEN = os.getenv("DISCORD_TOKEN")
STEAM_API_KEY = os.getenv("STEAM_API_KEY")

# 데이터베이스 파일
DB_PATH = os.getenv("DB_PATH", "ddalgi_bot.db")

# 로그 채널 (None이면 로그 전송 안 함)
LOG_CHANNEL_ID = int(os.getenv("LOG_CHANNEL_ID", "0")) or None

# 시간대 (출석, 로또 생성 시간 기준)
TIMEZONE = "Asia/Seoul"

# 출석 랭킹 표시 인원
ATTENDANCE_RANK_LIMIT = 10

# 상호작용 타임아웃 (초 단위)
LEAGUE_VIEW_TIMEOUT = 300  # 5분
TEAM_SHUFFLE_VIEW_TIMEOUT = 60  # 1분
MUSIC_PLAYER_VIEW_TIMEOUT = 600  # 10분
BANPICK_COUNTDOWN = 3  # 밴픽 결과 발표 전 카운트다운 (초)

# 음악 설정
MUSIC_AUTO_LEAVE_TIMEOUT = 180  # 3분간 혼자 있으면 자동 퇴장
MUSIC_QUEUE_PAGE_SIZE = 10  # 재생목록 한 페이지당 곡 수
MUSIC_REMOVE_PAGE_SIZE = 5  # 삭제 화면 한 페이지당 곡 수
MUSIC_STREAM_RETRY = 2  # 스트림 생성 재시도 횟수
MUSIC_RETRY_DELAY = 2  # 재시도 대기 (초)

# 노래 정보 검색용 (플레이리스트는 목록만 가져옴)
YTDL_SEARCH_OPTIONS = {
    'quiet': True,
    'no_warnings': True,
    'extract_flat': 'in_playlist',
    'skip_download': True,
}
# 스트림 주소 추출용
YTDL_STREAM_OPTIONS = {
    'format': 'bestaudio/best',
    'noplaylist': True,
    'quiet': True,
    'no_warnings': True,
}
FFMPEG_OPTIONS = {
    'before_options': '-reconnect 1 -reconnect_streamed 1 -reconnect_delay_max 5',
    'options': '-vn',
}

# 오버워치 전적 API (OverFast)
OVERFAST_API_URL = "https://overfast-api.tekrop.fr"
HTTP_TIMEOUT = 15  # 외부 API 요청 타임아웃 (초)

# 스팀 API
STEAM_API_URL = "https://api.steampowered.com"
# 스팀 정보에 표시할 게임 {app_id: 표시 이름}
STEAM_TRACKED_GAMES = {
    578080: "배그",
    1568590: "구구덕",
}

# 욕설 필터 (기본 비활성화)
BAD_WORD_FILTER_ENABLED = False
BAD_WORDS_FILE = "badwords.json"
