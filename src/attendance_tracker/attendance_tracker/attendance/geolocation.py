from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from typing import Any, Mapping, Optional, Protocol

from ..core.constants import DEFAULT_GEOLOCATION_TIMEOUT_SECONDS
from ..core.exceptions import GeolocationUnavailable
from .model import Coordinates

logger = logging.getLogger(__name__)

_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="geolocation")


class GeolocationProvider(Protocol):
    def get_current_position(self) -> Coordinates:
        """Return the device position or raise GeolocationUnavailable."""

        raise NotImplementedError


class NoGeolocation:
    """Provider for clients that never share a position."""

    def get_current_position(self) -> Coordinates:
        raise GeolocationUnavailable("Geolocation is not supported by this client")


class RequestGeolocation:
    """Coordinates posted by the browser along with the check-in request."""

    def __init__(self, payload: Optional[Mapping[str, Any]]):
        self._payload = payload or {}

    def get_current_position(self) -> Coordinates:
        lat = self._payload.get("latitude")
        lng = self._payload.get("longitude")
        if lat in (None, "") or lng in (None, ""):
            raise GeolocationUnavailable("No coordinates in request")
        try:
            latitude = float(lat)
            longitude = float(lng)
        except (TypeError, ValueError) as e:
            raise GeolocationUnavailable(f"Invalid coordinates: {lat!r}, {lng!r}") from e
        if not (-90.0 <= latitude <= 90.0 and -180.0 <= longitude <= 180.0):
            raise GeolocationUnavailable(f"Coordinates out of range: {latitude}, {longitude}")
        return Coordinates(latitude=latitude, longitude=longitude)


def acquire_location(
    provider: Optional[GeolocationProvider],
    *,
    timeout: float = DEFAULT_GEOLOCATION_TIMEOUT_SECONDS,
) -> Optional[Coordinates]:
    """Best-effort position lookup bounded by ``timeout`` seconds.

    Any failure, including a timeout, yields ``None``: location must never
    block or fail a check-in.
    """

    if provider is None:
        return None

    future = _executor.submit(provider.get_current_position)
    try:
        return future.result(timeout=timeout)
    except FutureTimeout:
        future.cancel()
        logger.debug("Geolocation timed out after %.1fs; continuing without location", timeout)
    except GeolocationUnavailable as e:
        logger.debug("Geolocation unavailable: %s", e)
    except Exception:
        logger.debug("Geolocation provider failed; continuing without location", exc_info=True)
    return None


def provider_from_payload(payload: Optional[Mapping[str, Any]]) -> GeolocationProvider:
    """Clients that post no coordinates at all never shared a position."""
    if not payload or ("latitude" not in payload and "longitude" not in payload):
        return NoGeolocation()
    return RequestGeolocation(payload)
