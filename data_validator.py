'''
Flight data validator.
Run this to check the integrity of the airport and flight collections before
publishing them. The engine assumes these rules hold and does not re-check.
'''
import re
import sys
from collections import Counter
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from datasource import DataSourceError, load_records

VALID_CONTINENTS = ['AF', 'AN', 'AS', 'EU', 'NA', 'OC', 'SA']
AIRPORT_CODE = re.compile(r'^[A-Z]{3,4}$')
EARLIEST_YEAR = 1990


def validate_date(date_str: str, today: Optional[date] = None) -> Optional[str]:
    '''Return an error message for a bad ``M/D/YYYY`` date, None when valid.'''
    trimmed = (date_str or '').strip()
    if not trimmed:
        return 'Empty date'

    parts = trimmed.split('/')
    if len(parts) != 3:
        return f'Invalid format: "{trimmed}" (expected M/D/YYYY)'
    try:
        month, day, year = (int(p) for p in parts)
    except ValueError:
        return f'Non-numeric values: "{trimmed}"'

    if not 1 <= month <= 12:
        return f'Invalid month {month}: "{trimmed}"'
    if not 1 <= day <= 31:
        return f'Invalid day {day}: "{trimmed}"'
    if year < EARLIEST_YEAR:
        return f'Year too old ({year}): "{trimmed}"'
    try:
        parsed = date(year, month, day)
    except ValueError:
        return f'Invalid date: "{trimmed}"'

    # booked flights may be up to a year ahead
    today = today or date.today()
    try:
        horizon = today.replace(year=today.year + 1)
    except ValueError:  # Feb 29
        horizon = today.replace(year=today.year + 1, day=28)
    if parsed > horizon:
        return f'Date too far in future ({year}): "{trimmed}" - likely a typo'
    return None


def validate_airports(records: Iterable[Mapping[str, Any]]) -> Tuple[List[str], List[str]]:
    '''Validate the airport collection. Returns (errors, warnings).'''
    errors: List[str] = []
    warnings: List[str] = []
    codes = set()

    for idx, airport in enumerate(records):
        code = str(airport.get('code') or '').strip()
        if not code:
            errors.append(f"Airport {idx}: Missing code")
            continue
        if code in codes:
            errors.append(f"Airport {idx} ({code}): Duplicate code")
        codes.add(code)

        for coord in ('lat', 'lon'):
            try:
                float(airport.get(coord))
            except (TypeError, ValueError):
                errors.append(f"Airport {idx} ({code}): Missing or invalid {coord}")

        continent = str(airport.get('continent') or '')
        if continent and continent not in VALID_CONTINENTS:
            errors.append(
                f"Airport {idx} ({code}): Invalid continent '{continent}'. "
                f"Must be one of: {', '.join(VALID_CONTINENTS)}"
            )
        for field in ('name', 'country', 'countryName'):
            if not airport.get(field):
                warnings.append(f"Airport {idx} ({code}): Empty {field}")

    return errors, warnings


def validate_flights(records: Iterable[Mapping[str, Any]], airport_codes: Optional[set] = None,
                     today: Optional[date] = None) -> Tuple[List[str], List[str]]:
    '''Validate the flight collection. Returns (errors, warnings).'''
    errors: List[str] = []
    warnings: List[str] = []
    seen: Dict[str, int] = {}
    airline_variations: Dict[str, set] = {}

    for row_num, flight in enumerate(records, start=1):
        flight_date = str(flight.get('date') or '').strip()
        date_error = validate_date(flight_date, today)
        if date_error:
            errors.append(f"Flight {row_num}: {date_error}")

        endpoints = {}
        for side in ('origin', 'destination'):
            code = str(flight.get(f'{side}_code') or flight.get(side) or '').strip().upper()
            endpoints[side] = code
            if not AIRPORT_CODE.match(code):
                errors.append(f"Flight {row_num}: {side.title()} - Invalid airport code: \"{code}\"")
            elif airport_codes is not None and code not in airport_codes:
                warnings.append(f"Flight {row_num}: {side.title()} {code} not in airport catalog (will be skipped)")

        origin, destination = endpoints['origin'], endpoints['destination']
        if origin and origin == destination:
            errors.append(f"Flight {row_num}: Origin and destination are the same ({origin})")

        airline = str(flight.get('airline') or '').strip()
        if not airline:
            warnings.append(f"Flight {row_num}: Empty airline name")
        else:
            airline_variations.setdefault(airline.lower(), set()).add(airline)

        key = f"{flight_date}|{origin}|{destination}"
        if key in seen:
            warnings.append(
                f"Flight {row_num}: Possible duplicate of flight {seen[key]} "
                f"({flight_date}: {origin} → {destination})"
            )
        else:
            seen[key] = row_num

    for variations in airline_variations.values():
        if len(variations) > 1:
            warnings.append(f"Inconsistent airline naming: {', '.join(sorted(variations))}")

    return errors, warnings


def _report(title: str, items: List[str], limit: int):
    if not items:
        return
    print(f"\n{title} ({len(items)}):")
    for item in items[:limit]:
        print(f"   - {item}")
    if len(items) > limit:
        print(f"   ... and {len(items) - limit} more")


def validate_sources(airports_source: str, flights_source: str) -> bool:
    '''Validate both collections and print a report.'''
    print(f"Validating {airports_source} and {flights_source}...")
    try:
        airports = load_records(airports_source)
        flights = load_records(flights_source)
    except DataSourceError as e:
        print(f"❌ Error: {e}")
        return False

    airport_errors, airport_warnings = validate_airports(airports)
    codes = {str(a.get('code') or '').strip() for a in airports}
    flight_errors, flight_warnings = validate_flights(flights, codes)
    errors = airport_errors + flight_errors
    warnings = airport_warnings + flight_warnings

    print(f"\n📊 Statistics:")
    print(f"   Total airports: {len(airports)}")
    print(f"   Total flights: {len(flights)}")
    if airports:
        continent_counts = Counter(a.get('continent') or 'Unknown' for a in airports)
        print(f"\n🌍 Airports by continent:")
        for continent in sorted(continent_counts):
            print(f"   {continent}: {continent_counts[continent]}")

    _report("⚠️  Warnings", warnings, 10)
    _report("❌ Errors", errors, 20)
    if errors:
        return False

    print("\n✅ Validation passed!")
    return True


if __name__ == '__main__':
    from config import load_config

    cfg = load_config()
    airports_path = sys.argv[1] if len(sys.argv) > 1 else cfg.airports_source
    flights_path = sys.argv[2] if len(sys.argv) > 2 else cfg.flights_source

    if not validate_sources(airports_path, flights_path):
        print("\n⚠️  Please fix errors before publishing")
        sys.exit(1)
