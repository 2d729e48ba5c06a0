"""Client and map engine configuration for pynextrip."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pynextrip._constants import (
    BASE_URL,
    DEFAULT_CENTER,
    DEFAULT_ZOOM,
    FIT_PADDING_PX,
    MAX_POPUP_DEPARTURES,
    POPUP_OFFSET_PX,
    REQUEST_TIMEOUT_S,
    STOP_DETAIL_CONCURRENCY,
    VEHICLE_POLL_INTERVAL_S,
)
from pynextrip.exceptions import NexTripConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class MapViewConfig:
    """Initial map viewport.

    ``center`` is ``(lon, lat)``, the order map renderers take coordinates in.
    """

    center: tuple[float, float] = DEFAULT_CENTER
    zoom: float = DEFAULT_ZOOM


@dataclasses.dataclass(frozen=True)
class NexTripConfig:
    """Client and map engine configuration.

    Parameters
    ----------
    base_url : str
        NexTrip service base URL.
    request_timeout : float
        Total timeout in seconds for a single provider request.
    vehicle_poll_interval : float
        Seconds between vehicle refresh cycles.
    max_popup_departures : int
        Number of departures listed in a stop popup.
    fit_padding : int
        Padding in pixels used when framing the route line.
    popup_offset : int
        Popup offset in pixels from its marker.
    stop_detail_concurrency : int
        Maximum stop detail requests in flight while building stop markers.
        ``1`` fetches them one after the other.
    geometry_path : str or None
        Path to the GeoJSON route geometry dataset.
    api_trace_enabled : bool
        Log every provider request and response at DEBUG level.
    view : MapViewConfig
        Initial map viewport.
    """

    base_url: str = BASE_URL
    request_timeout: float = REQUEST_TIMEOUT_S
    vehicle_poll_interval: float = VEHICLE_POLL_INTERVAL_S
    max_popup_departures: int = MAX_POPUP_DEPARTURES
    fit_padding: int = FIT_PADDING_PX
    popup_offset: int = POPUP_OFFSET_PX
    stop_detail_concurrency: int = STOP_DETAIL_CONCURRENCY
    geometry_path: str | None = None
    api_trace_enabled: bool = False
    view: MapViewConfig = dataclasses.field(default_factory=MapViewConfig)

    def validate(self) -> NexTripConfig:
        """Raise :class:`NexTripConfigError` for unusable values, else return self."""
        if not self.base_url.startswith(("http://", "https://")):
            raise NexTripConfigError(f"base_url must be an http(s) URL, got {self.base_url!r}")
        if self.request_timeout <= 0:
            raise NexTripConfigError("request_timeout must be positive")
        if self.vehicle_poll_interval <= 0:
            raise NexTripConfigError("vehicle_poll_interval must be positive")
        if self.max_popup_departures < 0:
            raise NexTripConfigError("max_popup_departures must not be negative")
        if self.stop_detail_concurrency < 1:
            raise NexTripConfigError("stop_detail_concurrency must be at least 1")
        return self

    @classmethod
    def from_env(cls, **overrides: Any) -> NexTripConfig:
        """Create configuration from ``NEXTRIP_*`` environment variables.

        Explicit keyword arguments override environment values.

        Raises
        ------
        NexTripConfigError
            If a numeric variable cannot be parsed or a value is out of range.
        """
        env = os.environ

        _ENV_STR_MAP = {
            "NEXTRIP_BASE_URL": "base_url",
            "NEXTRIP_GEOMETRY_PATH": "geometry_path",
        }
        _ENV_FLOAT_MAP = {
            "NEXTRIP_REQUEST_TIMEOUT": "request_timeout",
            "NEXTRIP_VEHICLE_POLL_INTERVAL": "vehicle_poll_interval",
        }
        _ENV_INT_MAP = {
            "NEXTRIP_MAX_POPUP_DEPARTURES": "max_popup_departures",
            "NEXTRIP_FIT_PADDING": "fit_padding",
            "NEXTRIP_STOP_DETAIL_CONCURRENCY": "stop_detail_concurrency",
        }

        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        for mapping, caster in ((_ENV_FLOAT_MAP, float), (_ENV_INT_MAP, int)):
            for env_key, field_name in mapping.items():
                val = env.get(env_key)
                if val is None or field_name in overrides:
                    continue
                try:
                    config_kwargs[field_name] = caster(val)
                except ValueError as exc:
                    raise NexTripConfigError(f"{env_key} is not a valid number: {val!r}") from exc

        if "api_trace_enabled" not in overrides:
            config_kwargs["api_trace_enabled"] = _env_bool(
                env.get("NEXTRIP_API_TRACE_ENABLED"),
                False,
            )

        config_kwargs.update(overrides)

        return cls(**config_kwargs).validate()
