"""Storm grouping and map projections over a strike collection.

A storm is a run of strikes whose consecutive lightning times are no more
than ``gap_threshold_s`` apart. The partition is a single greedy pass over
the chronologically sorted strikes: a gap strictly greater than the
threshold closes the current storm. Every storm query in the app goes
through ``group_into_storms`` so that the storm shown for a selected strike
is always the one it belongs to in the full partition.
"""

from __future__ import annotations

from typing import Iterable

from donner.contracts.common import GeoPoint
from donner.contracts.storm import MapRegion, StormGroup
from donner.contracts.strike import Strike

DEFAULT_GAP_THRESHOLD_S = 3600.0

# Map viewport around located strikes
_REGION_PADDING = 1.5
_MIN_SPAN_DEG = 0.05
_DEFAULT_SPAN_DEG = 1.0


def group_into_storms(
    strikes: Iterable[Strike],
    gap_threshold_s: float = DEFAULT_GAP_THRESHOLD_S,
) -> list[StormGroup]:
    """Partition strikes into storms, most recent storm first."""
    ordered = sorted(strikes, key=lambda s: s.lightning_time)
    if not ordered:
        return []

    runs: list[list[Strike]] = [[ordered[0]]]
    for previous, strike in zip(ordered, ordered[1:]):
        gap = (strike.lightning_time - previous.lightning_time).total_seconds()
        if gap > gap_threshold_s:
            runs.append([strike])
        else:
            runs[-1].append(strike)

    storms = [StormGroup(strikes=run) for run in runs]
    storms.sort(key=lambda g: g.start_time, reverse=True)
    return storms


def storm_for_strike(
    strikes: Iterable[Strike],
    strike_id: str,
    gap_threshold_s: float = DEFAULT_GAP_THRESHOLD_S,
) -> StormGroup | None:
    """The storm containing ``strike_id``, or None if the strike is unknown."""
    for storm in group_into_storms(strikes, gap_threshold_s):
        if any(s.id == strike_id for s in storm.strikes):
            return storm
    return None


def storm_path(strikes: Iterable[Strike]) -> list[GeoPoint]:
    """Estimated strike positions in chronological order (the storm track)."""
    ordered = sorted(strikes, key=lambda s: s.lightning_time)
    return [s.estimated_location for s in ordered if s.estimated_location is not None]


def map_region(strikes: Iterable[Strike]) -> MapRegion:
    """Viewport covering every located strike and the observer positions.

    Spans are padded by 50% and never narrower than 0.05°. Without any
    located strike the region is a 1° square centered on (0, 0).
    """
    points: list[GeoPoint] = []
    observers: list[GeoPoint] = []
    for strike in strikes:
        estimated = strike.estimated_location
        if estimated is None:
            continue
        points.append(estimated)
        observers.append(strike.user_location)
    points.extend(observers)

    if not points:
        return MapRegion(
            center=GeoPoint(latitude=0.0, longitude=0.0),
            latitude_delta=_DEFAULT_SPAN_DEG,
            longitude_delta=_DEFAULT_SPAN_DEG,
        )

    lats = [p.latitude for p in points]
    lons = [p.longitude for p in points]
    min_lat, max_lat = min(lats), max(lats)
    min_lon, max_lon = min(lons), max(lons)

    return MapRegion(
        center=GeoPoint(
            latitude=(min_lat + max_lat) / 2,
            longitude=(min_lon + max_lon) / 2,
        ),
        latitude_delta=max((max_lat - min_lat) * _REGION_PADDING, _MIN_SPAN_DEG),
        longitude_delta=max((max_lon - min_lon) * _REGION_PADDING, _MIN_SPAN_DEG),
    )
