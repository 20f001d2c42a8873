from dataclasses import dataclass
from typing import Optional

from config.defaults import CURRENT_PERIOD


@dataclass(frozen=True)
class ActivityRecord:
    agent_id: str                 # Agent label as written by the source (may carry "(...)" suffixes)
    model_name: str
    color_name: Optional[str]
    activation_count: int
    store_name: str = ""
    is_prepaid: bool = False
    period: str = CURRENT_PERIOD  # "current" or "previous"


@dataclass(frozen=True)
class InventoryRow:
    store_name: str
    model_name: str
    color_name: Optional[str]
    quantity: int
    status: str = "정상"          # 정상 / 불량 / 이력


@dataclass(frozen=True)
class StoreOwnership:
    store_name: str
    agent_label: str              # Raw owner label, e.g. "홍길동(별도)"
    status: str = ""              # "미사용" marks a store that is no longer used
