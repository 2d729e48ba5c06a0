"""Popup HTML for stop and vehicle markers.

All provider text is HTML-escaped before interpolation.
"""

from __future__ import annotations

from html import escape

from pynextrip._constants import MAX_POPUP_DEPARTURES
from pynextrip.models.stop import Departure, Stop
from pynextrip.models.vehicle import Vehicle

NO_DEPARTURES_HTML = '<i class="popup-empty">No upcoming departures</i>'
_REALTIME_ICON = "&#128246;"


def _departure_row(index: int, departure: Departure) -> str:
    row_class = "popup-row-even" if index % 2 == 0 else "popup-row-odd"
    icon = _REALTIME_ICON if departure.is_realtime else ""
    title = f' title="{escape(departure.description)}"' if departure.description else ""
    return (
        f'<li class="{row_class}"{title}>'
        f"<span>{escape(departure.departure_text)}</span>"
        f'<span class="popup-realtime">{icon}</span>'
        "</li>"
    )


def departures_html(departures: tuple[Departure, ...] | list[Departure], limit: int = MAX_POPUP_DEPARTURES) -> str:
    """Render up to *limit* departures in provider order.

    An empty list (or a limit of zero) renders an explicit
    "No upcoming departures" line instead of an empty list.
    """
    shown = list(departures)[: max(limit, 0)]
    if not shown:
        return NO_DEPARTURES_HTML
    rows = "".join(_departure_row(i, dep) for i, dep in enumerate(shown))
    return f'<ul class="popup-departures">{rows}</ul>'


def stop_popup_html(stop: Stop, max_departures: int = MAX_POPUP_DEPARTURES) -> str:
    return (
        '<div class="popup popup-stop">'
        f'<div class="popup-title">Stop: {escape(stop.description)}</div>'
        '<div class="popup-subtitle">Next departures:</div>'
        f"{departures_html(stop.departures, max_departures)}"
        "</div>"
    )


def vehicle_popup_html(vehicle: Vehicle) -> str:
    return (
        f"<b>Bus ID:</b> {escape(vehicle.trip_id)}<br/>"
        f"<b>Route:</b> {escape(vehicle.route_id)}<br/>"
        f"<b>Direction:</b> {escape(vehicle.direction or vehicle.direction_id)}"
    )
