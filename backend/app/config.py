from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator


SNAPSHOT_BACKENDS = ("file", "postgres")

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


class Settings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8080
    web_root: Path = Path("web")
    snapshot_backend: str = "file"
    snapshot_path: Path = Path("data") / "rooms.json"
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"

    # PostgreSQL 접속 정보 (snapshot_backend == "postgres" 일 때만 사용)
    db_host: str = "localhost"
    db_name: str = "smart_hostel"
    db_user: str = "postgres"
    db_pass: str = ""

    @field_validator("snapshot_backend")
    def _known_backend(cls, v: str):
        v = v.strip().lower()
        if v not in SNAPSHOT_BACKENDS:
            raise ValueError(f"unknown snapshot backend: {v!r} (expected one of {SNAPSHOT_BACKENDS})")
        return v

    @field_validator("cors_origins", mode="before")
    def _split_origins(cls, v):
        if isinstance(v, str):
            return [o.strip() for o in v.split(",") if o.strip()]
        return v

    @classmethod
    def from_env(cls) -> "Settings":
        """.env 파일과 환경변수에서 설정을 읽는다. 비어있는 값은 기본값 사용."""
        load_dotenv()

        env = {
            "host": os.getenv("HOSTEL_HOST"),
            "port": os.getenv("HOSTEL_PORT"),
            "web_root": os.getenv("HOSTEL_WEB_ROOT"),
            "snapshot_backend": os.getenv("HOSTEL_SNAPSHOT_BACKEND"),
            "snapshot_path": os.getenv("HOSTEL_SNAPSHOT_PATH"),
            "cors_origins": os.getenv("HOSTEL_CORS_ORIGINS"),
            "log_level": os.getenv("HOSTEL_LOG_LEVEL"),
            "db_host": os.getenv("DB_HOST"),
            "db_name": os.getenv("DB_NAME"),
            "db_user": os.getenv("DB_USER"),
            "db_pass": os.getenv("DB_PASS"),
        }
        return cls(**{k: v for k, v in env.items() if v not in (None, "")})


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
