from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import Type

from slack_bolt.async_app import AsyncApp
from slack_sdk.errors import SlackApiError

from .config import Config, logger
from .days import reference_tz
from .handler import WordleTurtle
from .scheduler import DeadlineScheduler, ScheduledDays
from .slack import SlackAPIConnection
from .storage import SQLiteResultStore, StoreError


def build_turtle(app: AsyncApp, config: Type[Config] = Config) -> WordleTurtle:
    store = SQLiteResultStore(config.DB_PATH)
    slack = SlackAPIConnection(app.client)
    scheduler = DeadlineScheduler(
        store,
        slack,
        ScheduledDays(),
        tz=reference_tz(config.TIMEZONE),
        bot_name=config.BOT_NAME,
        deadline_hour=config.DEADLINE_HOUR,
        leaderboard_weekday=config.LEADERBOARD_WEEKDAY,
        lookback=config.LOOKBACK_DAYS,
    )
    return WordleTurtle(store, slack, scheduler, config.BOT_NAME, lookback=config.LOOKBACK_DAYS)


def create_app(config: Type[Config] = Config) -> AsyncApp:
    app = AsyncApp(token=config.SLACK_BOT_TOKEN, signing_secret=config.SLACK_SIGNING_SECRET)
    turtle = build_turtle(app, config)

    @app.event("message")
    async def handle_messages(event):
        # Ignore bot messages/edits/threads except normal user posts
        if event.get("subtype") is not None:
            return
        channel = event.get("channel")
        user = event.get("user")
        text = event.get("text", "") or ""
        if not channel or not user:
            return
        try:
            await turtle.handle_message(channel, user, text)
        except (SlackApiError, StoreError) as e:
            logger.error(f"Failed to handle message from {user} in {channel}: {e}")

    return app


async def startup_health_check(app: AsyncApp) -> bool:
    logger.info("🏥 Running startup health check...")
    try:
        resp = await app.client.auth_test()
    except SlackApiError as e:
        logger.error(f"❌ Slack authentication failed: {e}")
        return False
    logger.info(f"✅ Authenticated as {resp.get('user')} in {resp.get('team')}")
    return True


async def _run_socket_mode(app: AsyncApp, app_token: str) -> None:
    from slack_bolt.adapter.socket_mode.async_handler import AsyncSocketModeHandler

    await startup_health_check(app)
    logger.info("→ Starting Slack bot in Socket Mode…")
    await AsyncSocketModeHandler(app, app_token).start_async()


def _run_http(app: AsyncApp, port: int) -> None:
    from slack_bolt.adapter.fastapi.async_handler import AsyncSlackRequestHandler
    import uvicorn
    from fastapi import FastAPI, Request

    @asynccontextmanager
    async def lifespan(_api: FastAPI):
        await startup_health_check(app)
        yield

    api = FastAPI(lifespan=lifespan)
    handler = AsyncSlackRequestHandler(app)

    @api.post("/slack/events")
    async def slack_events(req: Request):
        return await handler.handle(req)

    logger.info(f"→ Starting HTTP server on :{port} …")
    uvicorn.run(api, host="0.0.0.0", port=port)


def main() -> None:
    try:
        Config.validate_config()
    except ValueError as e:
        raise SystemExit(f"❌ {e}")

    app = create_app(Config)
    if Config.USE_SOCKET_MODE:
        asyncio.run(_run_socket_mode(app, Config.APP_LEVEL_TOKEN))
    else:
        _run_http(app, Config.PORT)
