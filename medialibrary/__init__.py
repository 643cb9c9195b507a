"""Personal media library tracker (games, movies, series)"""

__version__ = "1.0.0"
