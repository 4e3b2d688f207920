import argparse
import logging
import os
import sys
from typing import List, Tuple

import pandas as pd

from app.config import Settings, configure_logging
from app.db.snapshot import build_store
from app.registry import RoomRegistry

logger = logging.getLogger(__name__)

# CSV 헤더
COLUMNS = ("roomNumber", "capacity", "hasAC", "hasAttachedWashroom")

TRUE_VALUES = ("1", "true", "y", "yes", "on")


def _as_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    if pd.isna(value):
        return False
    return str(value).strip().lower() in TRUE_VALUES


def _as_capacity(value) -> int:
    """숫자가 아니면 0 → registry 가 거절"""
    if pd.isna(value):
        return 0
    try:
        capacity = float(value)
    except (TypeError, ValueError):
        return 0
    return int(capacity) if capacity.is_integer() else 0


# -----------------------------------------------------------
# CSV 하나 처리
# -----------------------------------------------------------
def import_csv_file(csv_path: str, registry: RoomRegistry) -> Tuple[int, int]:
    """Add every row of one CSV through the registry. Returns (added, skipped)."""
    logger.info("[처리중] %s", csv_path)

    df = pd.read_csv(csv_path, dtype={"roomNumber": str})
    missing = [c for c in COLUMNS[:2] if c not in df.columns]
    if missing:
        logger.warning("%s: missing column(s) %s, skipped", csv_path, ", ".join(missing))
        return 0, len(df)

    added = skipped = 0
    for _, row in df.iterrows():
        room_number = row["roomNumber"]
        if pd.isna(room_number):
            skipped += 1
            continue

        ok = registry.add_room(
            str(room_number),
            _as_capacity(row["capacity"]),
            _as_bool(row.get("hasAC")),
            _as_bool(row.get("hasAttachedWashroom")),
        )
        if ok:
            added += 1
        else:
            logger.info("  skip %r (duplicate or invalid)", room_number)
            skipped += 1

    logger.info("[완료] %s: %d added, %d skipped", csv_path, added, skipped)
    return added, skipped


def collect_csv_paths(paths: List[str]) -> List[str]:
    """파일은 그대로, 디렉토리는 안의 *.csv 전부"""
    out = []
    for path in paths:
        if os.path.isdir(path):
            for file in sorted(os.listdir(path)):
                if file.lower().endswith(".csv"):
                    out.append(os.path.join(path, file))
        elif os.path.isfile(path):
            out.append(path)
        else:
            raise FileNotFoundError(path)
    return out


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Bulk-import hostel rooms from CSV files.")
    parser.add_argument("paths", nargs="+", help="CSV files or directories holding *.csv")
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    configure_logging(settings.log_level)

    try:
        csv_paths = collect_csv_paths(args.paths)
    except FileNotFoundError as e:
        print(f"경로 없음: {e}", file=sys.stderr)
        return 2

    registry = RoomRegistry.initialize(build_store(settings))

    total_added = total_skipped = 0
    for path in csv_paths:
        added, skipped = import_csv_file(path, registry)
        total_added += added
        total_skipped += skipped

    print(f"=== {len(csv_paths)} file(s): {total_added} added, {total_skipped} skipped, {len(registry)} rooms total ===")
    return 0


# 메인 실행
if __name__ == "__main__":
    sys.exit(main())
