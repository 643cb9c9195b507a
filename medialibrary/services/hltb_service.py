"""HowLongToBeat service"""

import json
import math
import time
from typing import Awaitable, Callable, Dict, List, Optional

import httpx
from bs4 import BeautifulSoup

from ..config import settings
from ..schemas.providers import HLTBDlc, HLTBGame, HLTBSearchResult
from .log_service import log_service

BASE_URL = "https://howlongtobeat.com"

HEADERS = {
    "Referer": BASE_URL,
    "Origin": BASE_URL,
    "Content-Type": "application/json",
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:145.0) Gecko/20100101 Firefox/145.0",
}


class HLTBError(Exception):
    """HowLongToBeat returned something we cannot use"""


def to_hours(seconds) -> Optional[float]:
    """Seconds -> hours rounded half-up to one decimal; 0/None means unknown"""
    if not seconds:
        return None
    return math.floor(seconds / 3600 * 10 + 0.5) / 10


def image_url(image: Optional[str]) -> Optional[str]:
    return f"{BASE_URL}/games/{image}" if image else None


class HLTBTokenCache:
    """
    Holds the finder API auth token.

    The token is fetched lazily and reused until it is older than the TTL,
    or until a caller forces a refresh after an authorization failure.
    """

    def __init__(
        self,
        fetch_token: Callable[[], Awaitable[str]],
        ttl_seconds: float = None,
    ):
        self.fetch_token = fetch_token
        self.ttl_seconds = (
            ttl_seconds
            if ttl_seconds is not None
            else settings.HLTB_TOKEN_TTL_MINUTES * 60
        )
        self.token: Optional[str] = None
        self.fetched_at: float = 0.0

    async def get_or_refresh(self, now: float = None, force: bool = False) -> str:
        now = time.time() if now is None else now
        if not force and self.token and now - self.fetched_at < self.ttl_seconds:
            return self.token

        log_service.provider("Fetching HLTB auth token")
        self.token = await self.fetch_token()
        self.fetched_at = now
        return self.token


class HLTBService:
    """HowLongToBeat integration (finder API + game page scraping)"""

    def __init__(self, client: httpx.AsyncClient = None):
        self.base_url = BASE_URL
        self.client = client or httpx.AsyncClient(timeout=30.0, headers=HEADERS)
        self.tokens = HLTBTokenCache(self._fetch_token)

    async def _fetch_token(self) -> str:
        response = await self.client.get(
            f"{self.base_url}/api/finder/init",
            params={"t": int(time.time() * 1000)},
            headers=HEADERS,
        )
        response.raise_for_status()
        token = response.json().get("token")
        if not token:
            raise HLTBError("HLTB auth token missing from init response")
        return token

    @staticmethod
    def _search_payload(query: str) -> Dict:
        return {
            "searchType": "games",
            "searchTerms": query.split(),
            "searchPage": 1,
            "size": 20,
            "searchOptions": {
                "games": {
                    "userId": 0,
                    "platform": "",
                    "sortCategory": "popular",
                    "rangeCategory": "main",
                    "rangeTime": {"min": None, "max": None},
                    "gameplay": {
                        "perspective": "",
                        "flow": "",
                        "genre": "",
                        "difficulty": "",
                    },
                    "rangeYear": {"min": "", "max": ""},
                    "modifier": "",
                },
                "users": {"sortCategory": "postcount"},
                "lists": {"sortCategory": "follows"},
                "filter": "",
                "sort": 0,
                "randomizer": 0,
            },
            "useCache": True,
        }

    async def search(self, query: str) -> List[HLTBSearchResult]:
        """
        Search games by name.

        A 403 means the auth token went stale: refresh it and retry once.
        """
        payload = self._search_payload(query.strip())

        for attempt in range(2):
            token = await self.tokens.get_or_refresh(force=attempt > 0)
            response = await self.client.post(
                f"{self.base_url}/api/finder",
                json=payload,
                headers={**HEADERS, "x-auth-token": token},
            )
            if response.status_code != 403:
                break
            log_service.provider("HLTB search returned 403, refreshing token")
        else:
            raise HLTBError("HLTB search failed: 403 after token refresh")

        if response.is_error:
            raise HLTBError(f"HLTB search failed: HTTP {response.status_code}")

        return [
            HLTBSearchResult(
                id=str(item.get("game_id")),
                name=item.get("game_name"),
                image_url=image_url(item.get("game_image")),
            )
            for item in response.json().get("data") or []
        ]

    async def get_game(self, game_id: str) -> HLTBGame:
        """Scrape game details from the __NEXT_DATA__ blob of the game page"""
        response = await self.client.get(
            f"{self.base_url}/game/{game_id}", headers=HEADERS
        )
        if response.is_error:
            raise HLTBError(f"HLTB game {game_id} not found: HTTP {response.status_code}")

        soup = BeautifulSoup(response.text, "html.parser")
        script = soup.find("script", id="__NEXT_DATA__")
        if script is None or not script.string:
            raise HLTBError(f"__NEXT_DATA__ missing on HLTB page for {game_id}")

        next_data = json.loads(script.string)
        game_data = (
            next_data.get("props", {}).get("pageProps", {}).get("game", {}).get("data")
            or {}
        )
        games = game_data.get("game") or [{}]
        game = games[0]
        relationships = game_data.get("relationships") or []

        return HLTBGame(
            id=str(game_id),
            name=game.get("game_name") or "",
            image_url=image_url(game.get("game_image")),
            gameplay_main=to_hours(game.get("comp_main")),
            gameplay_extra=to_hours(game.get("comp_plus")),
            gameplay_complete=to_hours(game.get("comp_100")),
            gameplay_all=to_hours(game.get("comp_all")),
            rating=game.get("review_score"),
            dlcs=[
                HLTBDlc(id=str(dlc.get("game_id")), name=dlc.get("game_name"))
                for dlc in relationships
            ],
        )

    async def close(self):
        """Close HTTP client"""
        await self.client.aclose()
