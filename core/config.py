from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

import streamlit as st

CONFIG_FILE_NAME = "settings.json"
ENV_DATA_DIR = "MARKET_PRO_DATA_DIR"
ENV_LOG_LEVEL = "MARKET_PRO_LOG_LEVEL"
ENV_LOG_JSON = "MARKET_PRO_LOG_JSON"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    db_path: Path
    currency: str = "EGP"
    log_level: str = "INFO"
    log_json: bool = False


def _default_data_dir() -> Path:
    return Path.home() / ".market_pro"


def _load_persisted_settings(data_dir: Path) -> dict:
    cfg = data_dir / CONFIG_FILE_NAME
    if cfg.exists():
        try:
            return json.loads(cfg.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable %s", cfg)
            return {}
    return {}


def persist_data_dir(data_dir_str: str) -> None:
    data_dir = Path(data_dir_str).expanduser().resolve()
    data_dir.mkdir(parents=True, exist_ok=True)

    # The pointer lives in the default folder so the next start can find it.
    default_dir = _default_data_dir()
    default_dir.mkdir(parents=True, exist_ok=True)
    cfg = default_dir / CONFIG_FILE_NAME
    payload = {"data_dir": str(data_dir)}
    cfg.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    logger.info("Data directory set to %s", data_dir)

    # Update session for immediate effect
    st.session_state["market_pro_data_dir"] = str(data_dir)


@st.cache_resource
def get_settings() -> Settings:
    # Priority order:
    # 1) Session state (set via Data Management page)
    # 2) Environment variable
    # 3) Persisted settings in default folder
    # 4) Default folder
    if "market_pro_data_dir" in st.session_state:
        data_dir = Path(st.session_state["market_pro_data_dir"]).expanduser().resolve()
    elif os.getenv(ENV_DATA_DIR):
        data_dir = Path(os.getenv(ENV_DATA_DIR, "")).expanduser().resolve()
    else:
        default_dir = _default_data_dir()
        persisted = _load_persisted_settings(default_dir)
        data_dir = Path(persisted.get("data_dir", default_dir)).expanduser().resolve()

    data_dir.mkdir(parents=True, exist_ok=True)
    db_path = data_dir / "market_pro.db"
    return Settings(
        data_dir=data_dir,
        db_path=db_path,
        log_level=os.getenv(ENV_LOG_LEVEL, "INFO"),
        log_json=os.getenv(ENV_LOG_JSON, "").strip().lower() in {"1", "true", "yes"},
    )
