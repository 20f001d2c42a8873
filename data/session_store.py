"""Typed wrapper around st.session_state for application data."""

import streamlit as st
from typing import List, Optional
from models.agent import Agent
from models.catalog import PhoneModel
from models.history import HistoryEntry
from models.settings import AssignmentSettings
from data.sources import SnapshotSource
from engine.history import AssignmentHistory
from engine.score_cache import ScoreCache
from config.defaults import (
    SCORE_CACHE_TTL_SECONDS, SCORE_CACHE_MAX_SIZE, FETCH_MAX_WORKERS, MAX_HISTORY_COUNT,
)


def initialize_session_state():
    """Initialize all session state keys with defaults."""
    defaults = {
        "agents": [],
        "catalog": [],
        "snapshot_source": None,
        "settings": AssignmentSettings(),
        "last_entry": None,
        "history": AssignmentHistory(max_entries=MAX_HISTORY_COUNT),
        "score_cache": ScoreCache(default_ttl=SCORE_CACHE_TTL_SECONDS, max_size=SCORE_CACHE_MAX_SIZE),
        "data_loaded": False,
        "rule_config": {
            "score_cache_ttl": SCORE_CACHE_TTL_SECONDS,
            "fetch_max_workers": FETCH_MAX_WORKERS,
        },
    }
    for key, default in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = default


# --- Getters ---

def get_agents() -> List[Agent]:
    return st.session_state.get("agents", [])


def get_catalog() -> List[PhoneModel]:
    return st.session_state.get("catalog", [])


def get_snapshot_source() -> Optional[SnapshotSource]:
    return st.session_state.get("snapshot_source")


def get_settings() -> AssignmentSettings:
    return st.session_state.get("settings", AssignmentSettings())


def get_last_entry() -> Optional[HistoryEntry]:
    """The run on display: its result plus the settings, agents and data it was computed from."""
    return st.session_state.get("last_entry")


def get_history() -> AssignmentHistory:
    return st.session_state["history"]


def get_score_cache() -> ScoreCache:
    return st.session_state["score_cache"]


def get_rule_config() -> dict:
    return st.session_state.get("rule_config", {})


def is_data_loaded() -> bool:
    return st.session_state.get("data_loaded", False)


# --- Setters ---

def set_agents(agents: List[Agent]):
    st.session_state["agents"] = agents


def set_catalog(catalog: List[PhoneModel]):
    st.session_state["catalog"] = catalog


def set_snapshot_source(source: SnapshotSource):
    st.session_state["snapshot_source"] = source
    # New data invalidates every cached score
    get_score_cache().clear()


def set_settings(settings: AssignmentSettings):
    st.session_state["settings"] = settings


def set_last_entry(entry: Optional[HistoryEntry]):
    st.session_state["last_entry"] = entry


def set_data_loaded(loaded: bool):
    st.session_state["data_loaded"] = loaded


def set_rule_config(config: dict):
    st.session_state["rule_config"] = config
