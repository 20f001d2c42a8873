"""Generate synthetic test datasets for the Phone Inventory Assignment engine."""

import pandas as pd
import random
import os
from typing import Dict

AGENT_PROFILES = [
    ("A001", "Kim Minsu", "Seoul Office", "Retail", "Senior"),
    ("A002", "Lee Jiwon", "Seoul Office", "Retail", "Junior"),
    ("A003", "Park Seojun", "Seoul Office", "Wholesale", "Senior"),
    ("A004", "Choi Yuna", "Busan Office", "Retail", "Senior"),
    ("A005", "Jung Hoyoung", "Busan Office", "Wholesale", "Junior"),
    ("A006", "Kang Dahye", "Busan Office", "Wholesale", "Senior"),
    ("A007", "Yoon Taemin", "Daegu Office", "Retail", "Junior"),
    ("A008", "Han Soojin", "Daegu Office", "Retail", "Trainee"),   # no stores
]

CATALOG = [
    ("Galaxy S25", "Black", 30),
    ("Galaxy S25", "Silver", 20),
    ("Galaxy S25", "Blue", 11),
    ("iPhone 16", "Black", 25),
    ("iPhone 16", "White", 14),
    ("Galaxy Z Flip6", "Mint", 7),
]

ACTIVATION_TYPES = ["New", "Port-in", "Upgrade", "선불"]


def _store_owners() -> Dict[str, str]:
    """Store -> owner label. Some labels carry "(별도)" suffixes to mimic the source sheets."""
    random.seed(42)
    owners = {}
    for _, name, *_ in AGENT_PROFILES[:-1]:
        for i in range(random.randint(2, 5)):
            label = f"{name}(별도)" if i % 3 == 2 else name
            owners[f"{name.split()[1]} Mobile {i + 1}"] = label
    return owners


def generate_agents_df() -> pd.DataFrame:
    """Generate the agent roster: 8 agents across 3 offices and 2 departments."""
    return pd.DataFrame([
        {"Agent ID": a, "Agent Name": n, "Office": o, "Department": d, "Qualification": q}
        for a, n, o, d, q in AGENT_PROFILES
    ])


def generate_catalog_df() -> pd.DataFrame:
    """Generate the model/color quantities to distribute."""
    return pd.DataFrame([{"Model": m, "Color": c, "Quantity": q} for m, c, q in CATALOG])


def generate_stores_df() -> pd.DataFrame:
    """Generate the store master. One store is flagged unused."""
    rows = []
    for idx, (store, owner) in enumerate(sorted(_store_owners().items())):
        rows.append({"Store": store, "Agent": owner, "Status": "미사용" if idx == 3 else "사용"})
    return pd.DataFrame(rows)


def generate_activity_df(seed: int = 42, scale: float = 1.0) -> pd.DataFrame:
    """Generate activation rows (one row per activation) for one period."""
    owners = _store_owners()
    random.seed(seed)
    rows = []
    for store, owner in sorted(owners.items()):
        for model, color, _ in CATALOG:
            for _ in range(int(random.randint(0, 4) * scale)):
                rows.append({
                    "Agent": owner,
                    "Model": model,
                    "Color": color,
                    "Store": store,
                    "Activation Type": random.choice(ACTIVATION_TYPES),
                })
    return pd.DataFrame(rows, columns=["Agent", "Model", "Color", "Store", "Activation Type"])


def generate_inventory_df() -> pd.DataFrame:
    """Generate on-hand inventory per store, model and color."""
    random.seed(7)
    rows = []
    for store in sorted(_store_owners()):
        for model, color, _ in CATALOG:
            qty = random.randint(0, 6)
            if qty:
                rows.append({"Store": store, "Model": model, "Color": color, "Quantity": qty, "Status": "정상"})
            if random.random() < 0.1:
                rows.append({"Store": store, "Model": model, "Color": color, "Quantity": 1, "Status": "불량"})
    return pd.DataFrame(rows)


def generate_sample_frames() -> Dict[str, pd.DataFrame]:
    """All datasets keyed like ``data.loader.load_multi_sheet_excel`` returns them."""
    return {
        "agents": generate_agents_df(),
        "catalog": generate_catalog_df(),
        "activity_current": generate_activity_df(seed=42),
        "activity_previous": generate_activity_df(seed=43, scale=0.8),
        "inventory": generate_inventory_df(),
        "stores": generate_stores_df(),
    }


def generate_sample_excel(output_dir: str) -> str:
    """Write a single multi-tab Excel file with all datasets."""
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, "sample_assignment_data.xlsx")
    frames = generate_sample_frames()
    sheet_names = {
        "agents": "Agents",
        "catalog": "Catalog",
        "activity_current": "Activity",
        "activity_previous": "Previous Activity",
        "inventory": "Inventory",
        "stores": "Stores",
    }
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for key, sheet in sheet_names.items():
            frames[key].to_excel(writer, sheet_name=sheet, index=False)
    return path


if __name__ == "__main__":
    out = os.path.join(os.path.dirname(__file__), "..", "sample_files")
    path = generate_sample_excel(out)
    print(f"Sample Excel file generated at {path}")
