"""
Reading the published data collections.

Both collections are JSON: either a GeoJSON ``FeatureCollection`` (what the
website serves as ``visitedAirports.geojson`` / ``flights.geojson``) or a
plain list of records. A source is a local path or an http(s) URL.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import requests

logger = logging.getLogger(__name__)


class DataSourceError(RuntimeError):
    """A data collection could not be read or has the wrong shape."""

    def __init__(self, message: str, *, source: str = "", status_code: Optional[int] = None):
        super().__init__(message)
        self.source = source
        self.status_code = status_code


def is_url(source: Union[str, Path]) -> bool:
    return str(source).lower().startswith(("http://", "https://"))


def _fetch_url(url: str, timeout: float) -> Any:
    logger.info(f"Fetching {url}")
    try:
        response = requests.get(url, timeout=timeout, headers={"Accept": "application/json"})
    except requests.exceptions.Timeout as e:
        raise DataSourceError(f"Timed out fetching {url}", source=url) from e
    except requests.exceptions.RequestException as e:
        raise DataSourceError(f"Request failed for {url}: {e}", source=url) from e

    if response.status_code != 200:
        raise DataSourceError(
            f"HTTP {response.status_code} fetching {url}",
            source=url,
            status_code=response.status_code,
        )
    try:
        return response.json()
    except ValueError as e:
        raise DataSourceError(f"Invalid JSON from {url}", source=url) from e


def _read_path(path: Path) -> Any:
    if not path.exists():
        raise DataSourceError(f"{path} not found", source=str(path))
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise DataSourceError(f"Invalid JSON in {path}: {e}", source=str(path)) from e


def read_json_source(source: Union[str, Path], timeout: float = 10.0) -> Any:
    """Load raw JSON from a path or URL."""
    if is_url(source):
        return _fetch_url(str(source), timeout)
    return _read_path(Path(source))


def features_to_records(payload: Any, *, source: str = "") -> List[Dict[str, Any]]:
    """Flatten a FeatureCollection (or pass through a record list).

    Point geometries provide ``lon``/``lat``; LineString geometries provide
    ``origin_lon``/``origin_lat``/``destination_lon``/``destination_lat``.
    Values already present in the properties win over geometry.
    """
    if isinstance(payload, list):
        return [dict(item) for item in payload if isinstance(item, dict)]

    if not isinstance(payload, dict) or payload.get("type") != "FeatureCollection":
        raise DataSourceError(
            "Expected a GeoJSON FeatureCollection or a JSON list of records",
            source=source,
        )

    records: List[Dict[str, Any]] = []
    for feature in payload.get("features") or []:
        if not isinstance(feature, dict):
            continue
        record = dict(feature.get("properties") or {})
        geometry = feature.get("geometry") or {}
        coords = geometry.get("coordinates")
        if geometry.get("type") == "Point" and coords and len(coords) >= 2:
            record.setdefault("lon", coords[0])
            record.setdefault("lat", coords[1])
        elif geometry.get("type") == "LineString" and coords and len(coords) >= 2:
            (o_lon, o_lat), (d_lon, d_lat) = coords[0][:2], coords[-1][:2]
            record.setdefault("origin_lon", o_lon)
            record.setdefault("origin_lat", o_lat)
            record.setdefault("destination_lon", d_lon)
            record.setdefault("destination_lat", d_lat)
        records.append(record)
    return records


def load_records(source: Union[str, Path], timeout: float = 10.0) -> List[Dict[str, Any]]:
    records = features_to_records(read_json_source(source, timeout), source=str(source))
    logger.info(f"Loaded {len(records)} records from {source}")
    return records
