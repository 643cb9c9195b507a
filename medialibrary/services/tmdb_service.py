"""TMDB API service"""

import asyncio
from typing import Dict, List, Optional, Set

import httpx

from ..config import settings
from ..schemas.providers import (
    StreamingProvider,
    TMDBEpisode,
    TMDBSearchResult,
    TMDBTitle,
)
from .log_service import log_service

GERMAN = "de-DE"
ENGLISH = "en-US"


class TMDBService:
    """
    The Movie Database API integration.

    Every title is fetched twice: once in German (title, poster,
    certification and streaming providers for the watch region) and once in
    English (English title and genre names).
    """

    def __init__(
        self,
        api_key: Optional[str],
        client: httpx.AsyncClient = None,
        watch_region: str = None,
        provider_ids: Set[int] = None,
    ):
        self.api_key = api_key
        self.base_url = "https://api.themoviedb.org/3"
        self.image_base_url = "https://image.tmdb.org/t/p/w500"
        self.logo_base_url = "https://image.tmdb.org/t/p/w45"
        self.site_url = "https://www.themoviedb.org"
        self.watch_region = watch_region or settings.TMDB_WATCH_REGION
        self.provider_ids = (
            provider_ids if provider_ids is not None else settings.provider_ids
        )
        self.client = client or httpx.AsyncClient(timeout=30.0)

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def _request(self, endpoint: str, params: Dict = None) -> Dict:
        """Make request to TMDB API"""
        if not self.configured:
            raise ValueError("TMDB API key not configured")

        if params is None:
            params = {}

        params["api_key"] = self.api_key

        url = f"{self.base_url}/{endpoint}"

        try:
            response = await self.client.get(url, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as e:
            log_service.error(f"TMDB API error: {e}")
            raise

    async def _request_both(self, endpoint: str, german_params: Dict = None):
        """Fetch the German and English variant of an endpoint concurrently"""
        return await asyncio.gather(
            self._request(endpoint, {**(german_params or {}), "language": GERMAN}),
            self._request(endpoint, {"language": ENGLISH}),
        )

    def _image(self, path: Optional[str]) -> Optional[str]:
        return f"{self.image_base_url}{path}" if path else None

    def extract_providers(self, data: Dict) -> List[StreamingProvider]:
        """Flatrate providers in the watch region, limited to the allow-list"""
        region = (
            (data.get("watch/providers") or {})
            .get("results", {})
            .get(self.watch_region, {})
        )
        return [
            StreamingProvider(
                id=provider["provider_id"],
                name=provider.get("provider_name", ""),
                logo=f"{self.logo_base_url}{provider['logo_path']}"
                if provider.get("logo_path")
                else None,
            )
            for provider in region.get("flatrate") or []
            if provider.get("provider_id") in self.provider_ids
        ]

    @staticmethod
    def pick_english_title(
        original_language: Optional[str],
        english_title: Optional[str],
        original_title: Optional[str],
    ) -> Optional[str]:
        """
        German originals use the English localized title; everything else
        keeps its original title, which is what English speakers know it by.
        """
        if original_language == "de":
            return english_title
        return original_title or english_title

    def _movie_certification(self, data: Dict) -> Optional[str]:
        for country in (data.get("release_dates") or {}).get("results", []):
            if country.get("iso_3166_1") != self.watch_region:
                continue
            for release in country.get("release_dates", []):
                if release.get("certification"):
                    return release["certification"]
        return None

    def _series_certification(self, data: Dict) -> Optional[str]:
        for country in (data.get("content_ratings") or {}).get("results", []):
            if country.get("iso_3166_1") == self.watch_region:
                return country.get("rating") or None
        return None

    async def search(self, query: str, media_type: str = "movie") -> List[TMDBSearchResult]:
        """Search movies or series ('movie' / 'series'), top 20"""
        endpoint = "search/movie" if media_type == "movie" else "search/tv"
        german, english = await asyncio.gather(
            self._request(endpoint, {"query": query, "language": GERMAN}),
            self._request(endpoint, {"query": query, "language": ENGLISH}),
        )
        english_by_id = {item["id"]: item for item in english.get("results", [])}

        results = []
        for item in german.get("results", [])[:20]:
            english_item = english_by_id.get(item["id"], {})
            title_en = self.pick_english_title(
                item.get("original_language"),
                english_item.get("title") or english_item.get("name"),
                item.get("original_title") or item.get("original_name"),
            )
            title_de = item.get("title") or item.get("name")
            release_date = item.get("release_date") or item.get("first_air_date") or ""
            results.append(
                TMDBSearchResult(
                    id=str(item["id"]),
                    name=title_en or title_de,
                    title_en=title_en,
                    title_de=title_de,
                    image_url=self._image(item.get("poster_path")),
                    year=release_date[:4] or None,
                    rating=item.get("vote_average"),
                )
            )
        return results

    async def get_movie(self, tmdb_id: str) -> TMDBTitle:
        """Get movie details"""
        german, english = await self._request_both(
            f"movie/{tmdb_id}",
            {"append_to_response": "release_dates,watch/providers"},
        )
        original_language = german.get("original_language")

        return TMDBTitle(
            id=str(tmdb_id),
            media_type="movie",
            title_en=self.pick_english_title(
                original_language, english.get("title"), english.get("original_title")
            ),
            title_de=german.get("title"),
            image_url=self._image(german.get("poster_path")),
            year=(german.get("release_date") or "")[:4] or None,
            certification=self._movie_certification(german),
            rating=german.get("vote_average"),
            runtime=german.get("runtime") or None,
            genres=[genre["name"] for genre in english.get("genres") or []],
            streaming_providers=self.extract_providers(german),
            link_url=f"{self.site_url}/movie/{tmdb_id}",
            original_lang=original_language,
        )

    async def get_series(self, tmdb_id: str) -> TMDBTitle:
        """Get TV show details"""
        german, english = await self._request_both(
            f"tv/{tmdb_id}",
            {"append_to_response": "content_ratings,watch/providers"},
        )
        original_language = german.get("original_language")
        run_times = german.get("episode_run_time") or []

        return TMDBTitle(
            id=str(tmdb_id),
            media_type="series",
            title_en=self.pick_english_title(
                original_language, english.get("name"), english.get("original_name")
            ),
            title_de=german.get("name"),
            image_url=self._image(german.get("poster_path")),
            year=(german.get("first_air_date") or "")[:4] or None,
            certification=self._series_certification(german),
            rating=german.get("vote_average"),
            runtime=run_times[0] if run_times else None,
            seasons=german.get("number_of_seasons"),
            episodes=german.get("number_of_episodes"),
            genres=[genre["name"] for genre in english.get("genres") or []],
            streaming_providers=self.extract_providers(german),
            link_url=f"{self.site_url}/tv/{tmdb_id}",
            original_lang=original_language,
        )

    async def get_season_details(self, tmdb_id: str, season_number: int) -> Dict:
        """Get season details with episodes"""
        return await self._request(
            f"tv/{tmdb_id}/season/{season_number}", {"language": ENGLISH}
        )

    async def get_series_episodes(self, tmdb_id: str, seasons: int) -> List[TMDBEpisode]:
        """Episode metadata of seasons 1..N, fetched concurrently"""
        details = await asyncio.gather(
            *(self.get_season_details(tmdb_id, number) for number in range(1, seasons + 1))
        )
        episodes = []
        for season in details:
            for episode in season.get("episodes", []):
                episodes.append(
                    TMDBEpisode(
                        season=episode.get("season_number", season.get("season_number")),
                        episode=episode["episode_number"],
                        title=episode.get("name"),
                        air_date=episode.get("air_date"),
                        runtime=episode.get("runtime"),
                    )
                )
        return episodes

    async def close(self):
        """Close HTTP client"""
        await self.client.aclose()
