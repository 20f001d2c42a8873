"""File upload parsing — CSV/XLSX into typed model lists."""

import pandas as pd
from typing import Dict, List, Optional
from models.agent import Agent
from models.catalog import ColorVariant, PhoneModel
from models.records import ActivityRecord, InventoryRow, StoreOwnership
from config.defaults import CURRENT_PERIOD, PREPAID_MARKERS, NORMAL_INVENTORY_STATUSES


def _text(row, column: str, default: str = "") -> str:
    value = row.get(column)
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return default
    return str(value).strip()


def _optional_text(row, column: str) -> Optional[str]:
    value = _text(row, column)
    return value or None


def _int(row, column: str, default: int = 0) -> int:
    value = row.get(column)
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return default
    return int(float(value))


def _is_prepaid(row) -> bool:
    flag = row.get("Prepaid")
    if flag is not None and not (not isinstance(flag, str) and pd.isna(flag)):
        if isinstance(flag, str):
            return flag.strip().casefold() in ("true", "yes", "y", "1", "o")
        return bool(flag)
    activation_type = _text(row, "Activation Type").casefold()
    return any(marker.casefold() in activation_type for marker in PREPAID_MARKERS)


def parse_agents(df: pd.DataFrame) -> List[Agent]:
    """Convert an agent roster DataFrame into Agent objects."""
    agents = []
    for _, row in df.iterrows():
        agent_id = _text(row, "Agent ID")
        agents.append(Agent(
            agent_id=agent_id,
            display_name=_text(row, "Agent Name", agent_id),
            office=_text(row, "Office"),
            department=_text(row, "Department"),
            qualification=_text(row, "Qualification"),
        ))
    return agents


def parse_catalog(df: pd.DataFrame) -> List[PhoneModel]:
    """Convert a one-row-per-color catalog DataFrame into PhoneModel objects (first-seen order)."""
    models: Dict[str, PhoneModel] = {}
    for _, row in df.iterrows():
        model_name = _text(row, "Model")
        if model_name not in models:
            models[model_name] = PhoneModel(model_name=model_name)
        models[model_name].colors.append(ColorVariant(
            color_name=_text(row, "Color"),
            quantity=_int(row, "Quantity"),
        ))
    return list(models.values())


def parse_activity(df: pd.DataFrame, period: str = CURRENT_PERIOD) -> List[ActivityRecord]:
    """Convert an activation DataFrame into ActivityRecord objects.

    A missing "Activations" column counts each row as one activation.
    """
    records = []
    for _, row in df.iterrows():
        records.append(ActivityRecord(
            agent_id=_text(row, "Agent"),
            model_name=_text(row, "Model"),
            color_name=_optional_text(row, "Color"),
            activation_count=_int(row, "Activations", 1),
            store_name=_text(row, "Store"),
            is_prepaid=_is_prepaid(row),
            period=period,
        ))
    return records


def parse_inventory(df: pd.DataFrame) -> List[InventoryRow]:
    """Convert an inventory DataFrame into InventoryRow objects (one unit per row by default)."""
    rows = []
    for _, row in df.iterrows():
        rows.append(InventoryRow(
            store_name=_text(row, "Store"),
            model_name=_text(row, "Model"),
            color_name=_optional_text(row, "Color"),
            quantity=_int(row, "Quantity", 1),
            status=_text(row, "Status", NORMAL_INVENTORY_STATUSES[0]),
        ))
    return rows


def parse_stores(df: pd.DataFrame) -> List[StoreOwnership]:
    """Convert a store master DataFrame into StoreOwnership objects."""
    stores = []
    for _, row in df.iterrows():
        stores.append(StoreOwnership(
            store_name=_text(row, "Store"),
            agent_label=_text(row, "Agent"),
            status=_text(row, "Status"),
        ))
    return stores


def load_file(uploaded_file) -> pd.DataFrame:
    """Load an uploaded file (CSV or XLSX) into a DataFrame."""
    name = uploaded_file.name.lower()
    if name.endswith(".csv"):
        return pd.read_csv(uploaded_file)
    elif name.endswith(".xlsx") or name.endswith(".xls"):
        return pd.read_excel(uploaded_file, engine="openpyxl")
    else:
        raise ValueError(f"Unsupported file format: {name}. Use CSV or XLSX.")


# Expected sheet names for multi-tab Excel (case-insensitive matching)
SHEET_ALIASES = {
    "agents": ["agents", "agent", "roster", "agent roster", "sales agents", "영업사원"],
    "catalog": ["catalog", "models", "model catalog", "inventory plan", "모델"],
    "activity_current": ["activity", "current activity", "activations", "current", "당월개통"],
    "activity_previous": ["previous activity", "previous", "last month", "전월개통"],
    "inventory": ["inventory", "stock", "on hand", "재고"],
    "stores": ["stores", "store", "store master", "stores master", "출고처"],
}

REQUIRED_SHEETS = ["agents", "catalog", "activity_current", "inventory", "stores"]


def _match_sheet(sheet_names: List[str], category: str, required: bool = True) -> Optional[str]:
    """Find a sheet name matching the given category. Returns the matched name or raises."""
    aliases = SHEET_ALIASES[category]
    lower_map = {s.lower().strip(): s for s in sheet_names}
    for alias in aliases:
        if alias in lower_map:
            return lower_map[alias]
    if not required:
        return None
    raise ValueError(
        f"Could not find a sheet for '{category}'. "
        f"Expected one of: {aliases}. "
        f"Found sheets: {sheet_names}"
    )


def load_multi_sheet_excel(uploaded_file) -> Dict[str, Optional[pd.DataFrame]]:
    """Load a single Excel workbook holding every input dataset.

    Sheet names are matched case-insensitively against ``SHEET_ALIASES``. The
    previous-period activity sheet is optional and maps to ``None`` when absent.

    Returns {"agents", "catalog", "activity_current", "activity_previous",
    "inventory", "stores"} -> DataFrame.
    """
    xl = pd.ExcelFile(uploaded_file, engine="openpyxl")
    sheet_names = xl.sheet_names

    frames: Dict[str, Optional[pd.DataFrame]] = {}
    for category in SHEET_ALIASES:
        sheet = _match_sheet(sheet_names, category, required=category in REQUIRED_SHEETS)
        frames[category] = pd.read_excel(xl, sheet_name=sheet) if sheet else None
    return frames
