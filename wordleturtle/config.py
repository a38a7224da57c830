import os
import logging

from dotenv import load_dotenv

# Load env early
load_dotenv()

# Logging configuration
log_level = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=getattr(logging, log_level, logging.INFO),
)
logger = logging.getLogger("wordleturtle")

# Reduce noisy libraries
logging.getLogger("slack_bolt").setLevel(logging.WARNING)
logging.getLogger("slack_sdk").setLevel(logging.WARNING)
logging.getLogger("aiohttp").setLevel(logging.WARNING)
logging.getLogger("asyncio").setLevel(logging.WARNING)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


class Config:
    """Bot configuration read from the environment."""

    # Slack
    SLACK_BOT_TOKEN: str | None = os.getenv("SLACK_BOT_TOKEN")
    SLACK_SIGNING_SECRET: str | None = os.getenv("SLACK_SIGNING_SECRET")
    APP_LEVEL_TOKEN: str | None = os.getenv("APP_LEVEL_TOKEN")
    USE_SOCKET_MODE: bool = os.getenv("USE_SOCKET_MODE", "true").lower() == "true"
    PORT: int = int(os.getenv("PORT", "3000"))

    # Storage
    DB_PATH: str = os.getenv("DB_PATH", "./wordles.db")

    # Game
    BOT_NAME: str = os.getenv("BOT_NAME", "WordleTurtle")
    TIMEZONE: str = os.getenv("TIMEZONE", "America/Los_Angeles")
    DEADLINE_HOUR: int = int(os.getenv("DEADLINE_HOUR", "17"))
    LEADERBOARD_WEEKDAY: int = int(os.getenv("LEADERBOARD_WEEKDAY", "6"))  # Mon=0 .. Sun=6
    LOOKBACK_DAYS: int = int(os.getenv("LOOKBACK_DAYS", "7"))

    @classmethod
    def validate_config(cls) -> None:
        if not cls.SLACK_BOT_TOKEN:
            raise ValueError("SLACK_BOT_TOKEN environment variable is required")
        if cls.USE_SOCKET_MODE and not cls.APP_LEVEL_TOKEN:
            raise ValueError("APP_LEVEL_TOKEN is required when USE_SOCKET_MODE=true")
        if not cls.USE_SOCKET_MODE and not cls.SLACK_SIGNING_SECRET:
            raise ValueError("SLACK_SIGNING_SECRET is required when USE_SOCKET_MODE=false")
        if not 0 <= cls.DEADLINE_HOUR <= 23:
            raise ValueError(f"DEADLINE_HOUR must be between 0 and 23, got {cls.DEADLINE_HOUR}")
        if not 0 <= cls.LEADERBOARD_WEEKDAY <= 6:
            raise ValueError(f"LEADERBOARD_WEEKDAY must be between 0 and 6, got {cls.LEADERBOARD_WEEKDAY}")
        if cls.LOOKBACK_DAYS < 1:
            raise ValueError("LOOKBACK_DAYS must be at least 1")
