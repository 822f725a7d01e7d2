"""Image URL construction and small formatting helpers.

Image URLs are derived, never fetched: ``{image_base}/{size}{path}``. A
missing path yields None, which the UI treats as "no image".
"""

from datetime import date, datetime

from cinecache.core.exceptions import ValidationError

DEFAULT_IMAGE_BASE_URL = "https://image.tmdb.org/t/p"

IMAGE_SIZES: dict[str, tuple[str, ...]] = {
    "backdrop": ("w300", "w780", "w1280", "original"),
    "logo": ("w45", "w92", "w154", "w185", "w300", "w500", "original"),
    "poster": ("w92", "w154", "w185", "w342", "w500", "w780", "original"),
    "profile": ("w45", "w185", "h632", "original"),
    "still": ("w92", "w185", "w300", "original"),
}


class ImageURLs:
    """Builds TMDB image CDN URLs for each image kind."""

    def __init__(self, image_base_url: str = DEFAULT_IMAGE_BASE_URL) -> None:
        self.image_base_url = image_base_url.rstrip("/")

    def image_url(self, path: str | None, size: str = "w500") -> str | None:
        """Build an image URL, or None when there is no image path."""
        if not path:
            return None
        return f"{self.image_base_url}/{size}{path}"

    def _sized(self, kind: str, path: str | None, size: str) -> str | None:
        if size not in IMAGE_SIZES[kind]:
            raise ValidationError(
                f"Unsupported {kind} size {size!r}; expected one of "
                f"{', '.join(IMAGE_SIZES[kind])}",
                field="size",
            )
        return self.image_url(path, size)

    def backdrop_url(self, path: str | None, size: str = "w1280") -> str | None:
        return self._sized("backdrop", path, size)

    def poster_url(self, path: str | None, size: str = "w500") -> str | None:
        return self._sized("poster", path, size)

    def profile_url(self, path: str | None, size: str = "w185") -> str | None:
        return self._sized("profile", path, size)

    def logo_url(self, path: str | None, size: str = "w185") -> str | None:
        return self._sized("logo", path, size)

    def still_url(self, path: str | None, size: str = "w300") -> str | None:
        return self._sized("still", path, size)

    @staticmethod
    def image_sizes() -> dict[str, list[str]]:
        """Available sizes per image kind, keyed like TMDB's configuration."""
        return {f"{kind}_sizes": list(sizes) for kind, sizes in IMAGE_SIZES.items()}

    @staticmethod
    def format_date(value: date | datetime | str | None) -> str | None:
        """Format a date as YYYY-MM-DD; strings pass through unchanged."""
        if isinstance(value, datetime):
            return value.date().isoformat()
        if isinstance(value, date):
            return value.isoformat()
        return value
