"""Schema validation for uploaded data files."""

from dataclasses import dataclass, field
from typing import List, Optional
import pandas as pd

from models.agent import normalize_agent_name
from config.defaults import INACTIVE_STORE_STATUSES


@dataclass
class ValidationResult:
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


AGENT_REQUIRED_COLUMNS = ["Agent ID", "Agent Name", "Office", "Department"]

CATALOG_REQUIRED_COLUMNS = ["Model", "Color", "Quantity"]

ACTIVITY_REQUIRED_COLUMNS = ["Agent", "Model"]

INVENTORY_REQUIRED_COLUMNS = ["Store", "Model"]

STORE_REQUIRED_COLUMNS = ["Store", "Agent"]


def _check_required_columns(df: pd.DataFrame, required: List[str], file_label: str) -> ValidationResult:
    result = ValidationResult()
    missing = [col for col in required if col not in df.columns]
    if missing:
        result.is_valid = False
        result.errors.append(f"{file_label}: Missing required columns: {', '.join(missing)}")
    if df.empty:
        result.is_valid = False
        result.errors.append(f"{file_label}: File contains no data rows.")
    return result


def _check_non_negative(df: pd.DataFrame, column: str, file_label: str, result: ValidationResult):
    if column not in df.columns:
        return
    values = pd.to_numeric(df[column], errors="coerce")
    if values.isna().any():
        result.is_valid = False
        result.errors.append(f"{file_label}: {column} must be numeric.")
    elif (values < 0).any():
        result.is_valid = False
        result.errors.append(f"{file_label}: {column} cannot be negative.")


def validate_agents(df: pd.DataFrame) -> ValidationResult:
    result = _check_required_columns(df, AGENT_REQUIRED_COLUMNS, "Agent Roster")
    if not result.is_valid:
        return result

    dupes = df.duplicated(subset=["Agent ID"], keep=False)
    if dupes.any():
        result.is_valid = False
        result.errors.append(
            f"Agent Roster: Duplicate agent ids: {df[dupes]['Agent ID'].astype(str).unique().tolist()}"
        )
    return result


def validate_catalog(df: pd.DataFrame) -> ValidationResult:
    result = _check_required_columns(df, CATALOG_REQUIRED_COLUMNS, "Model Catalog")
    if not result.is_valid:
        return result

    _check_non_negative(df, "Quantity", "Model Catalog", result)

    dupes = df.duplicated(subset=["Model", "Color"], keep=False)
    if dupes.any():
        result.is_valid = False
        dupe_rows = df[dupes][["Model", "Color"]].drop_duplicates().to_dict("records")
        result.errors.append(f"Model Catalog: Duplicate model/color entries: {dupe_rows}")
    return result


def validate_activity(df: pd.DataFrame, label: str = "Activity") -> ValidationResult:
    result = _check_required_columns(df, ACTIVITY_REQUIRED_COLUMNS, label)
    if not result.is_valid:
        return result
    _check_non_negative(df, "Activations", label, result)
    return result


def validate_inventory(df: pd.DataFrame) -> ValidationResult:
    result = _check_required_columns(df, INVENTORY_REQUIRED_COLUMNS, "Inventory")
    if not result.is_valid:
        return result
    _check_non_negative(df, "Quantity", "Inventory", result)
    return result


def validate_stores(df: pd.DataFrame) -> ValidationResult:
    return _check_required_columns(df, STORE_REQUIRED_COLUMNS, "Store Master")


def validate_cross_file(
    agents_df: pd.DataFrame,
    stores_df: pd.DataFrame,
    activity_df: Optional[pd.DataFrame] = None,
) -> ValidationResult:
    """Check that agent labels line up across roster, store master and activity."""
    result = ValidationResult()
    roster_keys = set()
    for _, row in agents_df.iterrows():
        roster_keys.add(normalize_agent_name(row["Agent ID"]))
        roster_keys.add(normalize_agent_name(row["Agent Name"]))
    roster_keys.discard("")

    inactive = {s.casefold() for s in INACTIVE_STORE_STATUSES}
    active_stores = stores_df
    if "Status" in stores_df.columns:
        active_stores = stores_df[~stores_df["Status"].fillna("").astype(str).str.strip().str.casefold().isin(inactive)]
    store_owners = {normalize_agent_name(v) for v in active_stores["Agent"].dropna()}
    without_stores = sorted(
        str(row["Agent ID"]) for _, row in agents_df.iterrows()
        if not ({normalize_agent_name(row["Agent ID"]), normalize_agent_name(row["Agent Name"])} & store_owners)
    )
    if without_stores:
        result.warnings.append(
            f"Agents without any store: {', '.join(without_stores)}. "
            "They will be excluded from every assignment."
        )

    if activity_df is not None and "Agent" in activity_df.columns:
        unknown = sorted({
            str(v).strip() for v in activity_df["Agent"].dropna()
            if normalize_agent_name(v) not in roster_keys
        })
        if unknown:
            result.warnings.append(
                f"Activity for unknown agents: {', '.join(unknown[:20])}. "
                "These rows will be ignored."
            )
    return result
