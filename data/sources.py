"""Snapshot sources and the concurrent fetch that joins them into one DataSnapshot.

A source wraps whatever system holds the activity, inventory and store data
(spreadsheets, a database, uploaded files). The engine never talks to a source
directly: ``fetch_snapshot`` pulls every dataset once, in parallel, and the
run is computed against that joined snapshot.
"""

import logging
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime
from typing import Dict, List, Optional, Sequence

import pandas as pd

from models.records import ActivityRecord, InventoryRow, StoreOwnership
from models.snapshot import DataSnapshot
from data.loader import parse_activity, parse_inventory, parse_stores
from config.defaults import CURRENT_PERIOD, PREVIOUS_PERIOD, FETCH_MAX_WORKERS

logger = logging.getLogger(__name__)


class CollaboratorError(RuntimeError):
    """An external data source failed while a snapshot was being fetched."""

    def __init__(self, dataset: str, source_name: str, cause: BaseException):
        super().__init__(f"Failed to fetch {dataset} from {source_name}: {cause}")
        self.dataset = dataset
        self.source_name = source_name


class SnapshotSource(ABC):
    """Contract for anything that can supply assignment input data."""

    name: str = ""

    @abstractmethod
    def fetch_activity(self, period: str, model_names: Sequence[str]) -> List[ActivityRecord]:
        """Return activation records for ``period`` ("current" or "previous")."""

    @abstractmethod
    def fetch_inventory(self, model_names: Sequence[str]) -> List[InventoryRow]:
        """Return on-hand inventory rows per store."""

    @abstractmethod
    def fetch_store_ownership(self) -> List[StoreOwnership]:
        """Return store -> owning agent label rows."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"


def _keep_models(rows, model_names: Sequence[str]):
    if not model_names:
        return list(rows)
    wanted = {str(m).strip().casefold() for m in model_names}
    return [r for r in rows if str(r.model_name).strip().casefold() in wanted]


class FrameSnapshotSource(SnapshotSource):
    """Source backed by already-loaded DataFrames (uploaded CSV/XLSX files)."""

    name = "uploaded files"

    def __init__(
        self,
        activity_current: Optional[pd.DataFrame] = None,
        activity_previous: Optional[pd.DataFrame] = None,
        inventory: Optional[pd.DataFrame] = None,
        stores: Optional[pd.DataFrame] = None,
    ):
        self._frames: Dict[str, Optional[pd.DataFrame]] = {
            CURRENT_PERIOD: activity_current,
            PREVIOUS_PERIOD: activity_previous,
            "inventory": inventory,
            "stores": stores,
        }

    def fetch_activity(self, period, model_names):
        df = self._frames.get(period)
        if df is None:
            return []
        return _keep_models(parse_activity(df, period=period), model_names)

    def fetch_inventory(self, model_names):
        df = self._frames["inventory"]
        if df is None:
            return []
        return _keep_models(parse_inventory(df), model_names)

    def fetch_store_ownership(self):
        df = self._frames["stores"]
        if df is None:
            return []
        return parse_stores(df)


def fetch_snapshot(
    source: SnapshotSource,
    model_names: Sequence[str],
    max_workers: int = FETCH_MAX_WORKERS,
) -> DataSnapshot:
    """Fetch all datasets from ``source`` in parallel and join them.

    Any failing fetch is re-raised as ``CollaboratorError``; no partial
    snapshot is ever returned.
    """
    start = datetime.now()
    tasks = {
        "current activity": lambda: source.fetch_activity(CURRENT_PERIOD, model_names),
        "previous activity": lambda: source.fetch_activity(PREVIOUS_PERIOD, model_names),
        "inventory": lambda: source.fetch_inventory(model_names),
        "store ownership": source.fetch_store_ownership,
    }

    results = {}
    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as executor:
        future_to_dataset = {executor.submit(fn): dataset for dataset, fn in tasks.items()}
        for future in as_completed(future_to_dataset):
            dataset = future_to_dataset[future]
            try:
                results[dataset] = future.result()
            except Exception as e:
                logger.error(f"Fetching {dataset} from {source!r} failed: {e}")
                for pending in future_to_dataset:
                    pending.cancel()
                raise CollaboratorError(dataset, source.name or type(source).__name__, e) from e

    elapsed = (datetime.now() - start).total_seconds()
    snapshot = DataSnapshot(
        activity_current=results["current activity"],
        activity_previous=results["previous activity"],
        inventory=results["inventory"],
        stores=results["store ownership"],
        snapshot_id=f"{source.name or type(source).__name__}@{start:%Y%m%d%H%M%S%f}",
    )
    logger.info(
        f"Fetched snapshot in {elapsed:.2f}s: {len(snapshot.all_activity)} activity rows, "
        f"{len(snapshot.inventory)} inventory rows, {len(snapshot.stores)} store rows"
    )
    return snapshot
