import requests
from math import radians, sin, cos, sqrt, atan2
from typing import Optional
from app.core.config import settings
from app.schemas.itinerary import Coordinates
from app.utils.logger import get_logger

logger = get_logger(__name__)

EARTH_RADIUS_KM = 6371.0


def haversine_distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in km."""
    dlat = radians(lat2 - lat1)
    dlon = radians(lon2 - lon1)
    a = (
        sin(dlat / 2) ** 2
        + cos(radians(lat1)) * cos(radians(lat2)) * sin(dlon / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * atan2(sqrt(a), sqrt(1 - a))


class GeocodingClient:
    """Free-text place lookup against a Nominatim instance."""

    def __init__(self, base_url: Optional[str] = None):
        self.base_url = (base_url or settings.NOMINATIM_URL).rstrip("/")
        self.timeout = settings.HTTP_TIMEOUT
        self.headers = {"User-Agent": settings.HTTP_USER_AGENT}

    def geocode(self, query: str) -> Optional[Coordinates]:
        """
        Resolve an address or place name to its first matching coordinate.

        Returns None when nothing matches or the lookup fails; callers decide
        whether that is fatal.
        """
        try:
            resp = requests.get(
                f"{self.base_url}/search",
                params={"q": query, "format": "json", "limit": 1},
                headers=self.headers,
                timeout=self.timeout,
            )
            resp.raise_for_status()
            results = resp.json()
            if not results:
                logger.info("No geocoding match for '%s'", query)
                return None
            hit = results[0]
            coords = Coordinates(lat=float(hit["lat"]), lon=float(hit["lon"]))
            logger.debug("Geocoded '%s' -> (%.5f, %.5f)", query, coords.lat, coords.lon)
            return coords
        except requests.exceptions.Timeout:
            logger.warning(
                "Geocoding timeout after %ss for '%s'", self.timeout, query
            )
        except requests.exceptions.RequestException as e:
            logger.warning("Geocoding request failed for '%s': %s", query, e)
        except (ValueError, KeyError, TypeError, IndexError) as e:
            logger.warning("Unexpected geocoding response for '%s': %s", query, e)

        return None


geocoding_client = GeocodingClient()
