from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


@dataclass(frozen=True)
class RoomConfig:
    """Static metadata of the monitored room."""
    room_id: str = "WEST_WING_B4"
    expected_occupancy: str = "occupied"


@dataclass(frozen=True)
class OracleConfigData:
    """Reasoning oracle endpoint (OpenAI-compatible chat completions)."""
    base_url: str
    model: str
    api_key_env: str = "SAFETYHALO_ORACLE_API_KEY"
    timeout_s: float = 15.0
    verify_tls: bool = True
    temperature: float = 0.2
    call_timeout_s: Optional[float] = None

    def api_key(self) -> Optional[str]:
        return os.getenv(self.api_key_env) or None


@dataclass(frozen=True)
class StorageConfig:
    """Durable storage location and event log bound."""
    directory: str = "~/.safetyhalo"
    log_capacity: int = 100


@dataclass(frozen=True)
class AlertConfig:
    """Audio output parameters."""
    audio: bool = True
    sample_rate: int = 44100
    volume: float = 1.0


@dataclass(frozen=True)
class TrendConfig:
    """Trend sampler cadence and window length."""
    interval_s: float = 3.0
    max_points: int = 20


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"


@dataclass(frozen=True)
class AppConfig:
    """
    Root application configuration loaded from YAML.

    This is the single source of truth for deployment values. User settings
    (confidence threshold, alerts toggle) are not part of it: they live in
    durable storage and change at runtime.
    """
    room: RoomConfig
    oracle: OracleConfigData
    storage: StorageConfig
    alerts: AlertConfig
    trend: TrendConfig
    logging: LoggingConfig


def _read_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError("config.yaml must contain a YAML mapping at the root")
    return data


def _section(raw: Dict[str, Any], name: str) -> Dict[str, Any]:
    sec = raw.get(name) or {}
    if not isinstance(sec, dict):
        raise ValueError(f"config section '{name}' must be a mapping")
    return sec


def _resolve_default_config_path() -> Path:
    """
    Resolve config.yaml location.

    Priority:
    1) SAFETYHALO_CONFIG env var if provided
    2) config.yaml next to the executable
    3) ./config.yaml in current working directory
    """
    env = os.getenv("SAFETYHALO_CONFIG")
    if env:
        return Path(env).expanduser().resolve()

    exe_dir = Path(sys.executable).resolve().parent
    candidate = exe_dir / "config.yaml"
    if candidate.exists():
        return candidate

    return Path("config.yaml").resolve()


def load_app_config(path: Optional[str] = None) -> AppConfig:
    """
    Load application configuration from YAML and convert into typed config objects.

    Parameters
    ----------
    path
        Explicit path to config.yaml. If None, uses default resolution.

    Returns
    -------
    AppConfig
        Parsed and validated configuration.

    Raises
    ------
    FileNotFoundError
        If config file does not exist.
    ValueError
        If required fields are missing or invalid.
    """
    cfg_path = Path(path).expanduser().resolve() if path else _resolve_default_config_path()
    if not cfg_path.exists():
        raise FileNotFoundError(f"Config not found: {cfg_path}")

    raw = _read_yaml(cfg_path)

    # ---- room ----
    r = _section(raw, "room")
    room = RoomConfig(
        room_id=str(r.get("room_id", "WEST_WING_B4")),
        expected_occupancy=str(r.get("expected_occupancy", "occupied")),
    )

    # ---- oracle ----
    o = _section(raw, "oracle")
    try:
        call_timeout = o.get("call_timeout_s")
        oracle = OracleConfigData(
            base_url=str(o["base_url"]),
            model=str(o["model"]),
            api_key_env=str(o.get("api_key_env", "SAFETYHALO_ORACLE_API_KEY")),
            timeout_s=float(o.get("timeout_s", 15.0)),
            verify_tls=bool(o.get("verify_tls", True)),
            temperature=float(o.get("temperature", 0.2)),
            call_timeout_s=None if call_timeout is None else float(call_timeout),
        )
    except KeyError as e:
        raise ValueError(f"oracle.{e.args[0]} is required") from None

    # ---- storage ----
    s = _section(raw, "storage")
    storage = StorageConfig(
        directory=str(s.get("directory", "~/.safetyhalo")),
        log_capacity=int(s.get("log_capacity", 100)),
    )
    if storage.log_capacity < 1:
        raise ValueError("storage.log_capacity must be >= 1")

    # ---- alerts ----
    a = _section(raw, "alerts")
    alerts = AlertConfig(
        audio=bool(a.get("audio", True)),
        sample_rate=int(a.get("sample_rate", 44100)),
        volume=float(a.get("volume", 1.0)),
    )
    if not 0.0 <= alerts.volume <= 1.0:
        raise ValueError("alerts.volume must be within [0, 1]")

    # ---- trend ----
    t = _section(raw, "trend")
    trend = TrendConfig(
        interval_s=float(t.get("interval_s", 3.0)),
        max_points=int(t.get("max_points", 20)),
    )
    if trend.interval_s <= 0 or trend.max_points < 1:
        raise ValueError("trend.interval_s must be > 0 and trend.max_points >= 1")

    # ---- logging ----
    lg = _section(raw, "logging")
    logging_cfg = LoggingConfig(level=str(lg.get("level", "INFO")).upper())

    return AppConfig(
        room=room,
        oracle=oracle,
        storage=storage,
        alerts=alerts,
        trend=trend,
        logging=logging_cfg,
    )
