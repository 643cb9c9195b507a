"""Provider snapshot schemas (HLTB and TMDB)"""

from typing import List, Optional

from .base import CamelModel


class HLTBDlc(CamelModel):
    id: str
    name: Optional[str] = None


class HLTBGame(CamelModel):
    """Game details as scraped from HowLongToBeat (hours, one decimal)"""

    id: str
    name: Optional[str] = None
    image_url: Optional[str] = None
    gameplay_main: Optional[float] = None
    gameplay_extra: Optional[float] = None
    gameplay_complete: Optional[float] = None
    gameplay_all: Optional[float] = None
    rating: Optional[float] = None
    dlcs: List[HLTBDlc] = []


class HLTBLookup(HLTBGame):
    source: str  # 'cache' or 'hltb'


class HLTBSearchResult(CamelModel):
    id: str
    name: Optional[str] = None
    image_url: Optional[str] = None


class StreamingProvider(CamelModel):
    id: int
    name: str
    logo: Optional[str] = None


class TMDBTitle(CamelModel):
    """Merged de-DE / en-US TMDB details of a movie or series"""

    id: str
    media_type: str  # 'movie' or 'series'
    title_en: Optional[str] = None
    title_de: Optional[str] = None
    image_url: Optional[str] = None
    year: Optional[str] = None
    certification: Optional[str] = None
    rating: Optional[float] = None
    runtime: Optional[int] = None
    seasons: Optional[int] = None
    episodes: Optional[int] = None
    genres: List[str] = []
    streaming_providers: List[StreamingProvider] = []
    link_url: Optional[str] = None
    original_lang: Optional[str] = None


class TMDBLookup(TMDBTitle):
    source: str  # 'cache' or 'tmdb'


class TMDBEpisode(CamelModel):
    season: int
    episode: int
    title: Optional[str] = None
    air_date: Optional[str] = None
    runtime: Optional[int] = None


class TMDBSearchResult(CamelModel):
    id: str
    name: Optional[str] = None
    title_en: Optional[str] = None
    title_de: Optional[str] = None
    image_url: Optional[str] = None
    year: Optional[str] = None
    rating: Optional[float] = None
