"""NASA Astronomy Picture of the Day lookups."""
import logging
import os

import requests

from schemas import AstronomyLookup

logger = logging.getLogger(__name__)

DEFAULT_APOD_URL = "https://api.nasa.gov/planetary/apod"


class ApodClient:
    """Fetch the APOD image url for a calendar date.

    ``lookup`` never raises; failures come back as an ``AstronomyLookup``
    with ``error`` set so a submission can go ahead without the image.
    """

    def __init__(self, api_key: str = "DEMO_KEY", base_url: str = DEFAULT_APOD_URL, timeout: float = 10):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout

    @classmethod
    def from_env(cls) -> "ApodClient":
        return cls(
            api_key=os.getenv("NASA_KEY", "DEMO_KEY"),
            base_url=os.getenv("APOD_URL", DEFAULT_APOD_URL),
            timeout=float(os.getenv("APOD_TIMEOUT", "10")),
        )

    def lookup(self, date: str) -> AstronomyLookup:
        try:
            response = requests.get(
                self.base_url,
                params={"api_key": self.api_key, "date": date},
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            logger.warning(f"NASA API error for {date}: {e}")
            return AstronomyLookup(date=date, error=str(e))
        except ValueError as e:
            logger.warning(f"NASA API returned invalid JSON for {date}: {e}")
            return AstronomyLookup(date=date, error="invalid JSON response")

        url = payload.get("url") if isinstance(payload, dict) else None
        if not url or not isinstance(url, str):
            logger.warning(f"NASA API response for {date} has no image url")
            return AstronomyLookup(date=date, error="response has no url")

        return AstronomyLookup(date=date, url=url)
