#!/usr/bin/env python3
"""投票所データのダウンロード → data/polling_places.json"""

import sys
import json
import requests
from pathlib import Path

# プロジェクトルートをパスに追加
sys.path.insert(0, str(Path(__file__).parent.parent))

from civic_api.config import CATALOG_PATH
from civic_api.services.catalog import parse_catalog


def fetch_catalog(url: str, dest: Path = CATALOG_PATH) -> int:
    """URLからJSON配列を取得し、検証してから保存。件数を返す"""
    print(f"⬇️  Downloading {url}...")
    r = requests.get(url, timeout=30)
    r.raise_for_status()
    records = r.json()

    # 壊れたデータで既存カタログを上書きしない
    places = parse_catalog(records)

    dest.parent.mkdir(parents=True, exist_ok=True)
    with open(dest, "w", encoding="utf-8") as f:
        json.dump(records, f, ensure_ascii=False, indent=2)

    print(f"   {len(places)} places → {dest}")
    return len(places)


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("usage: fetch_catalog.py URL [DEST]")
        sys.exit(1)
    dest = Path(sys.argv[2]) if len(sys.argv) > 2 else CATALOG_PATH
    fetch_catalog(sys.argv[1], dest)
    print("\n✅ Catalog updated")
