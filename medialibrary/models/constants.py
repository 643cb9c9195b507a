"""Allowed values for enumerated columns"""

GAME_STATUSES = ("backlog", "wishlist", "started", "completed", "dropped", "shelved")
MOVIE_STATUSES = ("watchlist", "watching", "finished")
SERIES_STATUSES = ("watchlist", "watching", "finished", "dropped", "paused")

PLATFORMS = ("pc", "xbox", "switch", "3ds")
STOREFRONTS = ("steam", "epic", "gog", "battlenet", "uplay", "ea", "xbox")
GAME_TAGS = ("physical", "100%")

MEDIA_TYPES = ("game", "movie", "series")
TMDB_MEDIA_TYPES = ("movie", "series")


def sql_in(column: str, values) -> str:
    """Render a CHECK(column IN (...)) expression"""
    quoted = ", ".join(f"'{value}'" for value in values)
    return f"{column} IN ({quoted})"
