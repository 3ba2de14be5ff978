from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


APP_NAME_NO_SPACES = 'flight-history'

DEFAULT_AIRPORTS_FILE = 'visitedAirports.geojson'
DEFAULT_FLIGHTS_FILE = 'flights.geojson'


def project_root_dir() -> Path:
    # For dev runs, keep config.env next to the source files.
    return Path(__file__).resolve().parent


def _user_config_dir() -> Optional[Path]:
    """Return the per-user config directory (XDG), if one can be determined."""
    base = os.getenv('XDG_CONFIG_HOME')
    if base:
        return Path(base) / APP_NAME_NO_SPACES
    home = os.getenv('HOME')
    if not home:
        return None
    return Path(home) / '.config' / APP_NAME_NO_SPACES


def _candidate_dotenv_paths() -> list[Path]:
    """Return candidate locations for config.env.

    Precedence rule (first existing file wins):
    1) next to the sources
    2) current working directory
    3) per-user config directory
    """
    candidates: list[Path] = [project_root_dir() / 'config.env', Path.cwd() / 'config.env']

    user_dir = _user_config_dir()
    if user_dir is not None:
        candidates.append(user_dir / 'config.env')

    # De-dup while preserving order
    out: list[Path] = []
    seen: set[str] = set()
    for p in candidates:
        key = str(p.resolve())
        if key in seen:
            continue
        seen.add(key)
        out.append(p)
    return out


def dotenv_path() -> Path:
    """Return the first existing config.env candidate, otherwise the dev default."""
    for p in _candidate_dotenv_paths():
        if p.is_file():
            return p
    return project_root_dir() / 'config.env'


def load_dotenv_once() -> Optional[Path]:
    """Load config.env if present.

    Variables already set in the environment win over the file.
    """
    env_path = dotenv_path()
    if not env_path.is_file():
        return None
    load_dotenv(dotenv_path=str(env_path), override=False)
    return env_path


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or '').strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logging.getLogger(__name__).warning(f"{name}={raw!r} is not an integer, using {default}")
        return default


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or '').strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logging.getLogger(__name__).warning(f"{name}={raw!r} is not a number, using {default}")
        return default


@dataclass(frozen=True)
class LoadedConfig:
    data_dir: Path
    airports_source: str
    flights_source: str
    loaded_from: Optional[Path]
    http_timeout: float = 10.0
    top_routes_limit: int = 10
    log_level: str = 'INFO'

    @property
    def sources_are_remote(self) -> bool:
        return any(
            s.lower().startswith(('http://', 'https://'))
            for s in (self.airports_source, self.flights_source)
        )


def load_config() -> LoadedConfig:
    """Load settings from environment variables and/or config.env.

    Recognized variables:
      - FLIGHTS_DATA_DIR          directory holding the two collections (default: ./data)
      - FLIGHTS_AIRPORTS_SOURCE   path or URL of the airport collection
      - FLIGHTS_FLIGHTS_SOURCE    path or URL of the flight collection
      - FLIGHTS_HTTP_TIMEOUT      seconds, for URL sources
      - FLIGHTS_TOP_ROUTES        size of the busiest-routes ranking
      - FLIGHTS_LOG_LEVEL         logging level name for the CLI

    We only read config.env; we never modify it.
    """
    loaded_from = load_dotenv_once()

    data_dir = Path((os.getenv('FLIGHTS_DATA_DIR') or '').strip() or 'data')
    airports_source = (os.getenv('FLIGHTS_AIRPORTS_SOURCE') or '').strip() or str(data_dir / DEFAULT_AIRPORTS_FILE)
    flights_source = (os.getenv('FLIGHTS_FLIGHTS_SOURCE') or '').strip() or str(data_dir / DEFAULT_FLIGHTS_FILE)

    return LoadedConfig(
        data_dir=data_dir,
        airports_source=airports_source,
        flights_source=flights_source,
        loaded_from=loaded_from,
        http_timeout=_env_float('FLIGHTS_HTTP_TIMEOUT', 10.0),
        top_routes_limit=_env_int('FLIGHTS_TOP_ROUTES', 10),
        log_level=((os.getenv('FLIGHTS_LOG_LEVEL') or '').strip() or 'INFO').upper(),
    )


def setup_logging(level='INFO'):
    """Configure root logging for command-line entry points."""
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return logging.getLogger("flight_history")


def config_diagnostics() -> str:
    """Human-readable diagnostics for config/env loading."""
    cfg = load_config()
    candidates = _candidate_dotenv_paths()

    lines = []
    lines.append(f"CWD: {Path.cwd()}")
    lines.append(f"Resolved config.env: {dotenv_path()}")
    lines.append("Candidates searched:")
    for p in candidates:
        lines.append(f"  - {p} (exists={p.is_file()})")

    lines.append(f"Loaded from: {cfg.loaded_from}")
    lines.append(f"Airports source: {cfg.airports_source}")
    lines.append(f"Flights source: {cfg.flights_source}")
    lines.append(f"Remote sources: {cfg.sources_are_remote}")
    lines.append(f"HTTP timeout: {cfg.http_timeout}s")
    lines.append(f"Top routes: {cfg.top_routes_limit}")
    lines.append(f"Log level: {cfg.log_level}")
    return "\n".join(lines)
