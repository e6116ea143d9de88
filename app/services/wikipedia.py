import requests
from typing import List, Optional
from app.core.config import settings
from app.schemas.itinerary import POI
from app.utils.logger import get_logger

logger = get_logger(__name__)

# MediaWiki geosearch caps gsradius at 10 km and gslimit at 500
MAX_RADIUS_M = 10000
MAX_LIMIT = 500


class WikipediaPOIClient:
    """Nearby places of interest, taken from geotagged Wikipedia articles."""

    def __init__(self, api_url: Optional[str] = None):
        self.api_url = api_url or settings.WIKIPEDIA_API_URL
        self.timeout = settings.HTTP_TIMEOUT
        self.headers = {"User-Agent": settings.HTTP_USER_AGENT}

    def nearby(
        self,
        lat: float,
        lon: float,
        radius_km: Optional[float] = None,
        limit: Optional[int] = None,
    ) -> List[POI]:
        """
        Articles around (lat, lon), nearest first as returned by the API.

        An empty list is a normal answer; request or parse failures are logged
        and also yield an empty list.
        """
        radius_km = settings.POI_RADIUS_KM if radius_km is None else radius_km
        limit = settings.POI_LIMIT if limit is None else limit

        params = {
            "action": "query",
            "list": "geosearch",
            "gscoord": f"{lat}|{lon}",
            "gsradius": min(MAX_RADIUS_M, int(round(radius_km * 1000))),
            "gslimit": min(MAX_LIMIT, limit),
            "format": "json",
        }

        try:
            resp = requests.get(
                self.api_url, params=params, headers=self.headers, timeout=self.timeout
            )
            resp.raise_for_status()
            data = resp.json()
            hits = (data.get("query") or {}).get("geosearch") or []
            pois = [
                POI(name=h["title"], lat=float(h["lat"]), lon=float(h["lon"]))
                for h in hits
            ]
            logger.info(
                "Fetched %d POIs around (%.4f, %.4f) within %.1fkm",
                len(pois),
                lat,
                lon,
                radius_km,
            )
            return pois
        except requests.exceptions.Timeout:
            logger.warning("POI lookup timeout after %ss", self.timeout)
        except requests.exceptions.RequestException as e:
            logger.warning("POI lookup request failed: %s", e)
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning("Unexpected POI lookup response: %s", e)

        return []


poi_client = WikipediaPOIClient()
