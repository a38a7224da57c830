from __future__ import annotations

from typing import Dict, List, Protocol

from slack_sdk.web.async_client import AsyncWebClient

from .config import logger

MEMBERS_PAGE_SIZE = 100


class SlackConnection(Protocol):
    async def name_for_user(self, user_id: str) -> str: ...
    async def post_message(self, channel: str, text: str) -> None: ...
    async def get_users(self, channel: str) -> List[str]: ...


class SlackAPIConnection:
    """SlackConnection backed by the Web API. Errors surface as SlackApiError."""

    def __init__(self, client: AsyncWebClient):
        self.client = client
        self._name_cache: Dict[str, str] = {}

    async def name_for_user(self, user_id: str) -> str:
        if user_id in self._name_cache:
            return self._name_cache[user_id]
        resp = await self.client.users_info(user=user_id)
        profile = (resp.get("user") or {}).get("profile") or {}
        # too many names
        for key in ("display_name", "display_name_normalized", "first_name", "real_name", "real_name_normalized"):
            name = profile.get(key)
            if name:
                self._name_cache[user_id] = name
                return name
        return user_id

    async def post_message(self, channel: str, text: str) -> None:
        await self.client.chat_postMessage(channel=channel, text=text)

    async def get_users(self, channel: str) -> List[str]:
        # First page only
        resp = await self.client.conversations_members(channel=channel, limit=MEMBERS_PAGE_SIZE)
        members = list(resp.get("members") or [])
        logger.debug(f"Channel {channel} has {len(members)} members")
        return members
