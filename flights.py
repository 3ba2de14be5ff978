"""
Flight collection loading and enrichment.

Accepts two record shapes:
- raw rows ``{date, airline, origin, destination}`` (the sheet/CSV export),
  whose endpoints are joined against the airport catalog;
- already-enriched rows ``{id, date, airline, origin_code, origin_name, ...,
  destination_code, ...}`` (the published ``flights.geojson``).

Either way a flight whose origin or destination is missing from the catalog
is dropped with a warning and never reaches the derived structures.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from airports import AirportDB, airport_from_record
from models import Airport, Flight

logger = logging.getLogger(__name__)


def _endpoint_record(record: Mapping[str, Any], prefix: str) -> Dict[str, Any]:
    """Strip ``origin_`` / ``destination_`` off the denormalized fields."""
    plen = len(prefix) + 1
    return {
        key[plen:]: value
        for key, value in record.items()
        if key.startswith(prefix + "_")
    }


def _endpoint(record: Mapping[str, Any], prefix: str, catalog: Optional[AirportDB]) -> Optional[Airport]:
    code = str(record.get(f"{prefix}_code") or record.get(prefix) or "").strip().upper()
    if not code:
        return None

    known = catalog.get_airport(code) if catalog is not None else None
    if catalog is not None and known is None:
        return None

    fields = _endpoint_record(record, prefix)
    if len(fields) <= 1:
        # raw row: only the code, take everything from the catalog
        return known

    fields["code"] = code
    airport = airport_from_record(fields)
    if known is None:
        return airport
    # fill gaps (e.g. elevation is never denormalized) from the catalog
    merged = {
        name: getattr(airport, name) if getattr(airport, name) not in ("", None) else getattr(known, name)
        for name in Airport.__dataclass_fields__
    }
    if "lat" not in fields and "latitude" not in fields:
        merged["lat"] = known.lat
    if "lon" not in fields and "longitude" not in fields:
        merged["lon"] = known.lon
    return Airport(**merged)


def enrich_flights(records: Iterable[Mapping[str, Any]], catalog: Optional[AirportDB] = None) -> List[Flight]:
    """Turn source records into Flight objects, dropping unresolvable ones.

    Ids are the record's ``id`` when present, else its 1-based position in the
    input. Positions are assigned before dropping.
    """
    flights: List[Flight] = []
    dropped = 0
    for position, record in enumerate(records, start=1):
        origin = _endpoint(record, "origin", catalog)
        destination = _endpoint(record, "destination", catalog)
        if origin is None or destination is None:
            dropped += 1
            logger.warning(
                f"Skipping flight with missing airport: "
                f"{record.get('origin_code') or record.get('origin')} → "
                f"{record.get('destination_code') or record.get('destination')}"
            )
            continue

        raw_id = record.get("id")
        try:
            flight_id = int(raw_id) if raw_id not in (None, "") else position
        except (TypeError, ValueError):
            flight_id = position

        flights.append(
            Flight(
                id=flight_id,
                date=str(record.get("date") or "").strip(),
                airline=str(record.get("airline") or "").strip(),
                origin=origin,
                destination=destination,
            )
        )

    if dropped:
        logger.warning(f"Dropped {dropped} flight(s) with unknown airports")
    logger.info(f"Prepared {len(flights)} flights")
    return flights
