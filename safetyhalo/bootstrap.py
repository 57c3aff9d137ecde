from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from safetyhalo.audio.tone_sink import NullToneSink, ToneSink
from safetyhalo.core.alert.dispatcher import AlertDispatcher
from safetyhalo.core.config.yaml_config import AppConfig, load_app_config
from safetyhalo.core.context.assembler import ContextAssembler
from safetyhalo.core.logging_setup import configure_logging
from safetyhalo.core.persistence.json_storage import JsonFileStorage, KeyValueStorage
from safetyhalo.core.state.event_log import EventLogStore
from safetyhalo.core.state.trend_buffer import TrendBuffer
from safetyhalo.core.state_store import StateStore
from safetyhalo.oracle.base import SafetyOracle
from safetyhalo.oracle.http_oracle import HttpSafetyOracle, OracleClientConfig
from safetyhalo.runtime.app_runtime import AppRuntime, AppRuntimeConfig
from safetyhalo.runtime.event_bus import EventBus
from safetyhalo.services.controller import EvaluationController


@dataclass(frozen=True)
class AppWiring:
    """Everything the UI layer needs to run the system."""
    config: AppConfig
    store: StateStore
    bus: EventBus
    runtime: AppRuntime


def build_oracle(cfg: AppConfig) -> HttpSafetyOracle:
    return HttpSafetyOracle(
        OracleClientConfig(
            base_url=cfg.oracle.base_url,
            model=cfg.oracle.model,
            api_key=cfg.oracle.api_key(),
            timeout_s=cfg.oracle.timeout_s,
            verify_tls=cfg.oracle.verify_tls,
            temperature=cfg.oracle.temperature,
        )
    )


def build_store(cfg: AppConfig, storage: Optional[KeyValueStorage] = None) -> StateStore:
    store = StateStore(
        storage=storage if storage is not None else JsonFileStorage(cfg.storage.directory),
        event_log=EventLogStore(capacity=cfg.storage.log_capacity),
        trend=TrendBuffer(max_points=cfg.trend.max_points),
    )
    store.load()
    return store


def build_app_system(
    config_path: Optional[str] = None,
    sink: Optional[ToneSink] = None,
    storage: Optional[KeyValueStorage] = None,
    oracle: Optional[SafetyOracle] = None,
) -> AppWiring:
    cfg = load_app_config(config_path)
    configure_logging(cfg.logging.level)

    # --- STATE ---
    store = build_store(cfg, storage)

    # --- ALERTS ---
    dispatcher = AlertDispatcher(
        alerts_enabled=store.alerts_enabled,
        sink=sink if sink is not None else NullToneSink(),
    )

    # --- EVENT BUS ---
    bus = EventBus()

    # --- CONTROLLER ---
    assembler = ContextAssembler(
        room_id=cfg.room.room_id,
        expected_occupancy=cfg.room.expected_occupancy,
    )
    controller = EvaluationController(
        store=store,
        assembler=assembler,
        oracle=oracle if oracle is not None else build_oracle(cfg),
        dispatcher=dispatcher,
        bus=bus,
        oracle_timeout_s=cfg.oracle.call_timeout_s,
    )

    # --- RUNTIME ---
    runtime = AppRuntime(
        cfg=AppRuntimeConfig(trend_interval_s=cfg.trend.interval_s),
        controller=controller,
        store=store,
        assembler=assembler,
    )

    return AppWiring(config=cfg, store=store, bus=bus, runtime=runtime)
