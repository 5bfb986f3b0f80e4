"""アプリケーション設定"""
import os
from pathlib import Path

BASE_DIR = Path(__file__).parent.parent

# 投票所カタログ（JSON）。ファイルが無ければ組み込みのTysonsカタログを使う
CATALOG_PATH = Path(os.getenv("CATALOG_PATH", str(BASE_DIR / "data" / "polling_places.json")))

# 位置情報が取れない時の既定地点（Tysons Corner, VA）
DEFAULT_LAT = float(os.getenv("DEFAULT_LAT", "38.9187"))
DEFAULT_LNG = float(os.getenv("DEFAULT_LNG", "-77.2311"))
DEFAULT_RADIUS_M = int(os.getenv("DEFAULT_RADIUS_M", "5000"))

# 地図表示
FIT_PADDING = 1.3            # 30%の余白
MIN_REGION_SPAN = 0.01       # 1点だけの時の最小表示幅（度）
DEFAULT_REGION_SPAN = 0.05   # 結果が無い時の既定表示幅（度）

# ニュースフィード
NEWS_FEED_URL = os.getenv("NEWS_FEED_URL", "")
NEWS_TIMEOUT = float(os.getenv("NEWS_TIMEOUT", "5"))
NEWS_RETRIES = int(os.getenv("NEWS_RETRIES", "2"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))
