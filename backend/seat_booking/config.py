from functools import lru_cache
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field


load_dotenv()


class Settings(BaseModel):
    database_url: str = Field(default="sqlite+aiosqlite:///./seat_bookings.db")
    echo_sql: bool = Field(default=False)
    storage_key: str = Field(default="greenstitch-seat-bookings-v1")


@lru_cache
def get_settings() -> Settings:
    return Settings(
        database_url=os.getenv("DATABASE_URL", Settings.model_fields["database_url"].default),
        echo_sql=bool(int(os.getenv("ECHO_SQL", "0"))),
        storage_key=os.getenv("STORAGE_KEY", Settings.model_fields["storage_key"].default),
    )
