from pathlib import Path

import config

_VARS = (
    "FLIGHTS_DATA_DIR",
    "FLIGHTS_AIRPORTS_SOURCE",
    "FLIGHTS_FLIGHTS_SOURCE",
    "FLIGHTS_HTTP_TIMEOUT",
    "FLIGHTS_TOP_ROUTES",
    "FLIGHTS_LOG_LEVEL",
)


def _force_cwd_only(monkeypatch, tmp_path: Path) -> None:
    """Make tests deterministic by ensuring only the temp CWD has config.env."""
    monkeypatch.chdir(tmp_path)

    # Ensure we don't pick up the repo's real config.env or a per-user one.
    monkeypatch.setattr(config, 'project_root_dir', lambda: tmp_path)
    monkeypatch.setattr(config, '_user_config_dir', lambda: None)

    # setenv first so monkeypatch restores "unset" even after dotenv writes them
    for name in _VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


def test_defaults_without_config_file(tmp_path, monkeypatch):
    _force_cwd_only(monkeypatch, tmp_path)

    cfg = config.load_config()
    assert cfg.loaded_from is None
    assert cfg.data_dir == Path("data")
    assert cfg.airports_source == str(Path("data") / "visitedAirports.geojson")
    assert cfg.flights_source == str(Path("data") / "flights.geojson")
    assert cfg.http_timeout == 10.0
    assert cfg.top_routes_limit == 10
    assert cfg.log_level == "INFO"
    assert not cfg.sources_are_remote


def test_dotenv_path_prefers_existing(tmp_path, monkeypatch):
    env_file = tmp_path / "config.env"
    env_file.write_text(
        "FLIGHTS_DATA_DIR=public/data\n"
        "FLIGHTS_FLIGHTS_SOURCE=https://example.org/flights.geojson\n"
        "FLIGHTS_TOP_ROUTES=5\n"
        "FLIGHTS_LOG_LEVEL=debug\n"
    )
    _force_cwd_only(monkeypatch, tmp_path)

    cfg = config.load_config()
    assert cfg.loaded_from is not None
    assert Path(cfg.loaded_from) == env_file
    assert cfg.airports_source == str(Path("public/data") / "visitedAirports.geojson")
    assert cfg.flights_source == "https://example.org/flights.geojson"
    assert cfg.sources_are_remote
    assert cfg.top_routes_limit == 5
    assert cfg.log_level == "DEBUG"


def test_environment_wins_over_dotenv(tmp_path, monkeypatch):
    (tmp_path / "config.env").write_text("FLIGHTS_TOP_ROUTES=5\n")
    _force_cwd_only(monkeypatch, tmp_path)
    monkeypatch.setenv("FLIGHTS_TOP_ROUTES", "3")

    assert config.load_config().top_routes_limit == 3


def test_bad_numbers_fall_back_to_defaults(tmp_path, monkeypatch):
    _force_cwd_only(monkeypatch, tmp_path)
    monkeypatch.setenv("FLIGHTS_TOP_ROUTES", "many")
    monkeypatch.setenv("FLIGHTS_HTTP_TIMEOUT", "soon")

    cfg = config.load_config()
    assert cfg.top_routes_limit == 10
    assert cfg.http_timeout == 10.0


def test_diagnostics_lists_candidates(tmp_path, monkeypatch):
    _force_cwd_only(monkeypatch, tmp_path)
    text = config.config_diagnostics()
    assert text.startswith("CWD: ")
    assert "Candidates searched:" in text
    assert "Top routes: 10" in text
