"""CineCache - cached TMDB catalog backend for the movie browser."""

__version__ = "0.1.0"
