"""Tab 1: Data & Settings — data upload, factor ratios, assignment targets, rule config."""

import json
import logging

import streamlit as st

from data.loader import load_file, load_multi_sheet_excel, parse_agents, parse_catalog
from data.validator import (
    validate_agents, validate_catalog, validate_activity, validate_inventory,
    validate_stores, validate_cross_file,
)
from data.sample_data import generate_sample_frames
from data.sources import FrameSnapshotSource
from data.session_store import (
    set_agents, set_catalog, set_snapshot_source, set_data_loaded,
    set_last_entry, get_agents, get_settings, set_settings,
    get_rule_config, set_rule_config, is_data_loaded,
)
from models.settings import AssignmentRatios, AssignmentSettings, AssignmentTargets
from config.defaults import (
    DEFAULT_RATIOS, FACTOR_KEYS, FACTOR_LABELS, SCORE_CACHE_TTL_SECONDS, FETCH_MAX_WORKERS,
)

logger = logging.getLogger(__name__)


def _load_and_validate(frames):
    """Validate and store uploaded data."""
    errors = []
    warnings = []

    results = [
        validate_agents(frames["agents"]),
        validate_catalog(frames["catalog"]),
        validate_activity(frames["activity_current"], "Current Activity"),
        validate_inventory(frames["inventory"]),
        validate_stores(frames["stores"]),
    ]
    if frames.get("activity_previous") is not None:
        results.append(validate_activity(frames["activity_previous"], "Previous Activity"))

    for r in results:
        errors.extend(r.errors)
        warnings.extend(r.warnings)

    if not errors:
        cross = validate_cross_file(frames["agents"], frames["stores"], frames["activity_current"])
        warnings.extend(cross.warnings)

    if errors:
        for e in errors:
            st.error(e)
        return False

    for w in warnings:
        st.warning(w)

    # Parse and store
    agents = parse_agents(frames["agents"])
    catalog = parse_catalog(frames["catalog"])
    source = FrameSnapshotSource(
        activity_current=frames["activity_current"],
        activity_previous=frames.get("activity_previous"),
        inventory=frames["inventory"],
        stores=frames["stores"],
    )

    set_agents(agents)
    set_catalog(catalog)
    set_snapshot_source(source)
    set_last_entry(None)
    set_data_loaded(True)

    # Default targets: every office and department selected
    settings = get_settings()
    settings.targets = AssignmentTargets(
        offices={a.office: True for a in agents if a.office},
        departments={a.department: True for a in agents if a.department},
        agents={},
    )
    set_settings(settings)

    logger.info(f"Loaded {len(agents)} agents and {len(catalog)} models")
    st.success(
        f"Data loaded: {len(agents)} agents, {len(catalog)} models, "
        f"{sum(m.total_quantity for m in catalog):,} units to assign"
    )
    return True


def _render_upload():
    st.subheader("Data Upload")

    upload_mode = st.radio(
        "Upload mode",
        ["Single Excel file", "Separate files"],
        horizontal=True,
        key="upload_mode",
    )

    if upload_mode == "Single Excel file":
        st.caption(
            "Upload one `.xlsx` file with sheets named: "
            "**Agents**, **Catalog**, **Activity**, **Inventory**, **Stores** "
            "and optionally **Previous Activity** "
            "(also accepts aliases like 'Roster', 'Models', 'Stock', 'Store Master', etc.)"
        )
        single_file = st.file_uploader("Excel workbook", type=["xlsx"], key="upload_single")

        col_upload, col_sample = st.columns(2)
        with col_upload:
            if st.button("Upload & Validate", type="primary", key="btn_upload_single"):
                if single_file:
                    try:
                        _load_and_validate(load_multi_sheet_excel(single_file))
                    except ValueError as e:
                        st.error(f"Error loading file: {e}")
                else:
                    st.warning("Please upload an Excel file.")
        with col_sample:
            if st.button("Load Sample Data", key="btn_sample_single"):
                _load_and_validate(generate_sample_frames())

    else:
        labels = {
            "agents": "Agent Roster",
            "catalog": "Model Catalog",
            "activity_current": "Current Activity",
            "activity_previous": "Previous Activity (optional)",
            "inventory": "Inventory",
            "stores": "Store Master",
        }
        uploads = {}
        cols = st.columns(3)
        for i, (key, label) in enumerate(labels.items()):
            with cols[i % 3]:
                uploads[key] = st.file_uploader(label, type=["csv", "xlsx"], key=f"upload_{key}")

        col_upload, col_sample = st.columns(2)
        with col_upload:
            if st.button("Upload & Validate", type="primary", key="btn_upload_multi"):
                missing = [labels[k] for k, f in uploads.items() if f is None and k != "activity_previous"]
                if missing:
                    st.warning(f"Please upload: {', '.join(missing)}")
                else:
                    try:
                        frames = {k: load_file(f) if f is not None else None for k, f in uploads.items()}
                        _load_and_validate(frames)
                    except ValueError as e:
                        st.error(f"Error loading files: {e}")
        with col_sample:
            if st.button("Load Sample Data", key="btn_sample_multi"):
                _load_and_validate(generate_sample_frames())


def _render_ratios(settings: AssignmentSettings) -> AssignmentRatios:
    st.subheader("Factor Ratios")
    st.caption("Relative importance of each factor. Ratios are rescaled to shares of 100 before weighting.")

    values = {}
    cols = st.columns(len(FACTOR_KEYS))
    for col, key in zip(cols, FACTOR_KEYS):
        with col:
            values[key] = st.number_input(
                FACTOR_LABELS[key],
                min_value=0.0, max_value=100.0,
                value=float(getattr(settings.ratios, key)),
                step=5.0,
                key=f"ratio_{key}",
            )
    ratios = AssignmentRatios(**values)

    if ratios.total <= 0:
        st.warning("All ratios are zero: every agent gets the same weight.")
    else:
        shares = ratios.shares()
        st.caption(" · ".join(f"{FACTOR_LABELS[k]} {shares[k]:.0f}%" for k in FACTOR_KEYS))

    if st.button("Reset to Defaults", key="btn_reset_ratios"):
        for key in FACTOR_KEYS:
            st.session_state[f"ratio_{key}"] = float(DEFAULT_RATIOS[key])
        st.rerun()
    return ratios


def _render_targets(settings: AssignmentSettings) -> AssignmentTargets:
    st.subheader("Assignment Targets")
    st.caption(
        "An agent is eligible when selected individually, "
        "or when both their office and department are selected."
    )
    agents = get_agents()
    offices = sorted({a.office for a in agents if a.office})
    departments = sorted({a.department for a in agents if a.department})
    agent_names = {a.agent_id: f"{a.display_name} ({a.agent_id})" for a in agents}

    col1, col2 = st.columns(2)
    with col1:
        selected_offices = st.multiselect(
            "Offices", offices,
            default=[o for o in offices if settings.targets.offices.get(o)],
            key="targets_offices",
        )
    with col2:
        selected_departments = st.multiselect(
            "Departments", departments,
            default=[d for d in departments if settings.targets.departments.get(d)],
            key="targets_departments",
        )
    selected_agents = st.multiselect(
        "Individual Agents", list(agent_names),
        default=[a for a in agent_names if settings.targets.agents.get(a)],
        format_func=lambda x: agent_names.get(x, x),
        key="targets_agents",
    )

    return AssignmentTargets(
        offices={o: o in selected_offices for o in offices},
        departments={d: d in selected_departments for d in departments},
        agents={a: True for a in selected_agents},
    )


def _render_settings_io(settings: AssignmentSettings):
    with st.expander("Import / Export Settings", expanded=False):
        st.download_button(
            "Export Settings (JSON)",
            json.dumps(settings.to_dict(), ensure_ascii=False, indent=2),
            "assignment_settings.json",
            "application/json",
        )
        uploaded = st.file_uploader("Import settings JSON", type=["json"], key="upload_settings")
        if uploaded and st.button("Apply Imported Settings", key="btn_import_settings"):
            try:
                imported = AssignmentSettings.from_dict(json.load(uploaded))
            except (ValueError, TypeError) as e:
                st.error(f"Invalid settings file: {e}")
            else:
                set_settings(imported)
                for key in FACTOR_KEYS:
                    st.session_state[f"ratio_{key}"] = float(getattr(imported.ratios, key))
                st.success("Settings imported.")
                st.rerun()


def _render_rule_config():
    st.subheader("Rule Configuration")
    config = get_rule_config()

    col1, col2 = st.columns(2)
    with col1:
        ttl = st.number_input(
            "Score Cache TTL (seconds)", min_value=0, max_value=3600,
            value=int(config.get("score_cache_ttl", SCORE_CACHE_TTL_SECONDS)),
            step=30, key="cfg_cache_ttl",
            help="How long computed factor scores are reused for identical runs.",
        )
    with col2:
        workers = st.number_input(
            "Parallel Data Fetches", min_value=1, max_value=16,
            value=int(config.get("fetch_max_workers", FETCH_MAX_WORKERS)),
            step=1, key="cfg_fetch_workers",
        )

    if st.button("Save Rule Configuration"):
        set_rule_config({"score_cache_ttl": ttl, "fetch_max_workers": workers})
        st.success("Rule configuration saved.")


def render(sidebar_state):
    """Render the Data & Settings tab."""
    st.header("Data & Settings")

    _render_upload()
    st.divider()

    if not is_data_loaded():
        st.info("Load data to configure ratios and targets.")
        return

    settings = get_settings()
    ratios = _render_ratios(settings)
    st.divider()
    targets = _render_targets(settings)

    if st.button("Save Settings", type="primary", key="btn_save_settings"):
        set_settings(AssignmentSettings(ratios=ratios, targets=targets))
        st.success("Settings saved.")

    _render_settings_io(get_settings())
    st.divider()
    _render_rule_config()
