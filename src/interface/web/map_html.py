"""HTML for the embedded Google Maps project map."""
from __future__ import annotations

import html
import json
from typing import Mapping, Optional, Sequence

from src.core.entities import Category, MapMarker, Project
from src.core.labels import status_label, urgency_label
from src.utils.formatting import truncate

POPUP_DESCRIPTION_LENGTH = 150


def build_marker_points(
    markers: Sequence[MapMarker],
    projects_by_id: Mapping[str, Project],
    categories_by_id: Mapping[str, Category],
    *,
    detail_link: str = "?view=detail&project={id}",
) -> list[dict[str, object]]:
    """Return JSON-ready marker payloads with HTML-escaped popup fields."""
    points: list[dict[str, object]] = []
    for marker in markers:
        project = projects_by_id.get(marker.id)
        category = categories_by_id.get(project.category_id or "") if project else None
        description = project.description if project else None
        points.append(
            {
                "id": marker.id,
                "lat": marker.latitude,
                "lng": marker.longitude,
                "color": marker.category_color,
                "title": html.escape(marker.title, quote=False),
                "category": html.escape(category.name, quote=False) if category else "",
                "description": html.escape(
                    truncate(description, POPUP_DESCRIPTION_LENGTH), quote=False
                )
                if description
                else "",
                "location": html.escape(project.location_name, quote=False)
                if project and project.location_name
                else "",
                "votes": project.vote_score if project else 0,
                "comments": project.comment_count if project else 0,
                "status": status_label(marker.status),
                "urgency": urgency_label(marker.urgency_color) if marker.urgency_color else "",
                "link": detail_link.format(id=marker.id),
            }
        )
    return points


def build_google_map_html(
    points: Sequence[dict[str, object]],
    *,
    api_key: str,
    element_id: str,
    center: tuple[float, float],
    zoom: int = 11,
    height: int = 520,
    fit_bounds: Optional[bool] = None,
) -> str:
    """Render a Google Maps widget with one circle marker and popup per point.

    ``center`` is ``(latitude, longitude)``. Bounds are fitted to the markers
    unless ``fit_bounds`` is ``False``.
    """

    callback_name = f"initMap_{element_id.replace('-', '_')}"
    data_json = json.dumps(list(points), ensure_ascii=False)
    should_fit = "true" if (fit_bounds if fit_bounds is not None else len(points) > 1) else "false"
    latitude, longitude = center

    return f"""
<div id="{element_id}" style="height: {height}px; border-radius: 12px; overflow: hidden;"></div>
<script>
const mapPoints = {data_json};
function {callback_name}() {{
    const container = document.getElementById('{element_id}');
    if (!container) {{
        return;
    }}
    const map = new google.maps.Map(container, {{
        center: {{lat: {latitude}, lng: {longitude}}},
        zoom: {zoom},
        mapTypeControl: false,
        streetViewControl: false,
        fullscreenControl: false
    }});
    const bounds = new google.maps.LatLngBounds();
    mapPoints.forEach((item) => {{
        const position = new google.maps.LatLng(item.lat, item.lng);
        const marker = new google.maps.Marker({{
            position,
            map,
            title: item.title,
            icon: {{
                path: google.maps.SymbolPath.CIRCLE,
                scale: 10,
                fillColor: item.color,
                fillOpacity: 1,
                strokeColor: '#ffffff',
                strokeWeight: 3
            }}
        }});
        const details = [
            item.category ? `<p style="margin:4px 0 0;font-size:12px;color:#6b7280">${{item.category}}</p>` : '',
            item.description ? `<p style="margin:8px 0;font-size:14px;color:#374151">${{item.description}}</p>` : '',
            item.location ? `<p style="margin:8px 0 4px;font-size:13px;color:#6b7280">${{item.location}}</p>` : '',
            item.urgency ? `<p style="margin:4px 0;font-size:12px;font-weight:600">Next date: ${{item.urgency}}</p>` : ''
        ].join('');
        const info = new google.maps.InfoWindow({{
            content: `<div style="max-width:280px"><strong>${{item.title}}</strong>${{details}}`
                + `<div style="margin-top:8px;font-size:13px;color:#6b7280">&#9650; ${{item.votes}} &middot; ${{item.comments}} comments &middot; ${{item.status}}</div>`
                + `<a href="${{item.link}}" target="_top" style="display:block;margin-top:8px">View Details</a></div>`
        }});
        marker.addListener('click', () => info.open({{map, anchor: marker}}));
        bounds.extend(position);
    }});
    if ({should_fit} && !bounds.isEmpty()) {{
        map.fitBounds(bounds);
    }}
}}
</script>
<script src="https://maps.googleapis.com/maps/api/js?key={api_key}&callback={callback_name}" async defer></script>
"""


__all__ = ["build_google_map_html", "build_marker_points"]
