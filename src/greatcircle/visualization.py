#!/usr/bin/env python3
"""
Route visualization using folium maps.
"""

from typing import List, Optional
import logging
import math
import folium
from folium.template import Template

from .config import GreatCircleConfig
from .geometry import Coordinate
from .geometry_utils import angular_distance, destination, initial_bearing
from .proximity import ProximityMatch
from .route import Route
from .units import nm_to_radians, unwrap_longitude_degrees

logger = logging.getLogger(__name__)

ROUTE_COLOR = "#2E86AB"
POI_COLOR = "#D23C4C"


class RouteLegend(folium.MacroElement):
    """Legend with the number of points of interest near the route."""

    def __init__(self, match_count: int, max_distance: float):
        super().__init__()
        self._name = "RouteLegend"
        self.match_count = match_count
        self.max_distance = max_distance

        self._template = Template(
            """
        {% macro html(this, kwargs) %}
        <div id="route-legend" style="
            position: fixed;
            bottom: 50px;
            left: 50px;
            width: 230px;
            background-color: white;
            border: 2px solid grey;
            z-index: 9999;
            font-size: 13px;
            padding: 12px;
            font-family: Arial, sans-serif;
            border-radius: 5px;
            box-shadow: 0 2px 5px rgba(0,0,0,0.2);
        ">
            <b>Legend</b><br>
            <div style="margin: 4px 0; line-height: 1.3;">
                <span style="color: #2E86AB; font-size: 18px;">&mdash;</span>
                Great-circle route
            </div>
            <div style="margin: 4px 0; line-height: 1.3;">
                <span style="color: #D23C4C; font-size: 18px;">&#9679;</span>
                Within {{ this.max_distance }} nm ({{ this.match_count }})
            </div>
        </div>
        {% endmacro %}
        """
        )


def great_circle_track(
    start: Coordinate,
    end: Coordinate,
    max_step: float = 20.0,
    reference_longitude: Optional[float] = None,
) -> List[List[float]]:
    """
    Points along the great circle from start to end, for drawing.

    Longitudes are unwrapped point to point so the track stays continuous
    across the antimeridian and may leave [-180, 180].

    Args:
        start: Segment start
        end: Segment end
        max_step: Largest spacing between drawn points in nautical miles
        reference_longitude: Degrees the first point is unwrapped against
            (default: the start's own longitude)

    Returns:
        [[latitude, longitude], ...] in decimal degrees, including both ends
    """
    total = angular_distance(start, end)
    steps = max(1, math.ceil(total / nm_to_radians(max_step)))
    bearing = initial_bearing(start, end)
    track = [
        destination(start, bearing, total * i / steps) for i in range(steps)
    ] + [end]

    previous = (
        start.longitude_degrees if reference_longitude is None else reference_longitude
    )
    locations = []
    for point in track:
        previous = unwrap_longitude_degrees(point.longitude_degrees, previous)
        locations.append([point.latitude_degrees, previous])
    return locations


def _map_location(coordinate: Coordinate, center_longitude: float) -> List[float]:
    """[latitude, longitude] in degrees, with longitude on the map's side of the antimeridian."""
    return [
        coordinate.latitude_degrees,
        unwrap_longitude_degrees(coordinate.longitude_degrees, center_longitude),
    ]


def match_to_html(match: ProximityMatch) -> str:
    """Popup text for a point of interest."""
    poi = match.point_of_interest
    nearest = match.nearest_point_on_route
    html_parts = []
    if poi.name:
        html_parts.append(f"<b>{poi.name}</b><br>")
    html_parts.append(f"{match.distance:.1f} nm from route")
    html_parts.append(
        f"<br><i>Closest point:</i> {nearest.latitude_degrees:.4f}, "
        f"{nearest.longitude_degrees:.4f}"
    )
    return "".join(html_parts)


def create_route_map(
    route: Route,
    matches: List[ProximityMatch],
    output_filename: str,
    config: GreatCircleConfig,
) -> None:
    """
    Create an interactive map showing the route and nearby points of interest, save as HTML.

    Args:
        route: Route to draw
        matches: Points of interest near the route
        output_filename: Path where HTML map file should be saved
        config: Settings such as the map bounding box buffer

    Raises:
        ValueError: If route is empty
    """
    if not route:
        raise ValueError("Cannot create map for empty route")

    south, west, north, east = route.get_bbox(config.bbox_buffer)

    center_lat = (south + north) / 2
    center_lon = (west + east) / 2

    logger.debug(f"Creating map centered at ({center_lat:.4f}, {center_lon:.4f})")

    route_map = folium.Map(
        location=[center_lat, center_lon],
        tiles=None,
    )

    folium.TileLayer(
        tiles="CartoDB positron",
        attr=(
            "&copy; <a href='https://www.openstreetmap.org/copyright'>OpenStreetMap</a> "
            "contributors &copy; <a href='https://carto.com/attributions'>CARTO</a>"
        ),
        name="Standard",
        control=True,
        show=True,
    ).add_to(route_map)

    folium.TileLayer(
        tiles="https://server.arcgisonline.com/ArcGIS/rest/services/World_Imagery/MapServer/tile/{z}/{y}/{x}",
        attr=(
            "Tiles &copy; Esri &mdash; Source: Esri, i-cubed, USDA, USGS, AEX, GeoEye, "
            "Getmapping, Aerogrid, IGN, IGP, UPR-EGP, and the GIS User Community"
        ),
        name="Satellite",
        control=True,
        show=False,
    ).add_to(route_map)

    folium.LayerControl().add_to(route_map)

    coordinates: List[List[float]] = []
    for start, end in route.segments():
        reference = coordinates[-1][1] if coordinates else center_lon
        track = great_circle_track(
            start.coordinate, end.coordinate, reference_longitude=reference
        )
        coordinates.extend(track if not coordinates else track[1:])

    folium.PolyLine(
        coordinates,
        color=ROUTE_COLOR,
        weight=2,
        opacity=0.8,
        popup=f"Route ({route.total_distance():.0f} nm)",
        z_index=1,
    ).add_to(route_map)

    for point in route:
        folium.Marker(
            _map_location(point.coordinate, center_lon),
            popup=str(point),
            icon=folium.Icon(color="blue", icon="plane"),
        ).add_to(route_map)

    for match in matches:
        poi = match.point_of_interest.coordinate
        nearest = match.nearest_point_on_route
        poi_location = _map_location(poi, center_lon)

        folium.CircleMarker(
            poi_location,
            radius=6,
            color=POI_COLOR,
            fill=True,
            popup=folium.Popup(match_to_html(match), max_width=300),
        ).add_to(route_map)

        # Line of closest approach
        folium.PolyLine(
            [poi_location, _map_location(nearest, center_lon)],
            color=POI_COLOR,
            weight=1,
            dash_array="5, 5",
            z_index=2,
        ).add_to(route_map)

    route_map.add_child(RouteLegend(len(matches), config.max_distance))

    route_map.fit_bounds([[south, west], [north, east]])

    route_map.save(output_filename)

    logger.debug(
        f"Map saved to {output_filename} with {len(matches)} points of interest "
        f"within {config.max_distance} nm"
    )
