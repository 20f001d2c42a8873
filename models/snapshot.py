import hashlib
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from models.agent import normalize_agent_name
from models.records import ActivityRecord, InventoryRow, StoreOwnership


@dataclass
class DataSnapshot:
    """Joined activity/inventory/store data that one assignment run is computed against.

    Records are indexed once at construction so every color of every model sees
    the same data without re-reading the source lists.
    """
    activity_current: List[ActivityRecord] = field(default_factory=list)
    activity_previous: List[ActivityRecord] = field(default_factory=list)
    inventory: List[InventoryRow] = field(default_factory=list)
    stores: List[StoreOwnership] = field(default_factory=list)
    snapshot_id: str = ""
    _activity_index: Dict[str, List[ActivityRecord]] = field(default_factory=dict, init=False, repr=False, compare=False)
    _inventory_index: Dict[str, List[InventoryRow]] = field(default_factory=dict, init=False, repr=False, compare=False)
    _fingerprint: str = field(default="", init=False, repr=False, compare=False)

    def __post_init__(self):
        activity = defaultdict(list)
        for record in list(self.activity_current) + list(self.activity_previous):
            key = normalize_agent_name(record.agent_id)
            if key:
                activity[key].append(record)
        self._activity_index = dict(activity)

        inventory = defaultdict(list)
        for row in self.inventory:
            inventory[str(row.store_name).strip()].append(row)
        self._inventory_index = dict(inventory)

        if not self.snapshot_id:
            self._fingerprint = self._content_fingerprint()

    def _content_fingerprint(self) -> str:
        digest = hashlib.sha256()
        for label, rows in (
            ("current", self.activity_current),
            ("previous", self.activity_previous),
            ("inventory", self.inventory),
            ("stores", self.stores),
        ):
            digest.update(label.encode("utf-8"))
            for line in sorted(repr(r) for r in rows):
                digest.update(line.encode("utf-8"))
                digest.update(b"\n")
        return f"content:{digest.hexdigest()}"

    @property
    def cache_id(self) -> str:
        """``snapshot_id`` when the source set one, otherwise a fingerprint of the records."""
        return self.snapshot_id or self._fingerprint

    @property
    def all_activity(self) -> List[ActivityRecord]:
        return list(self.activity_current) + list(self.activity_previous)

    def activity_for(self, match_keys: Iterable[str]) -> List[ActivityRecord]:
        """Activity rows whose normalized agent label is one of ``match_keys``."""
        rows: List[ActivityRecord] = []
        for key in sorted(set(match_keys)):
            rows.extend(self._activity_index.get(key, []))
        return rows

    def inventory_for(self, store_names: Iterable[str]) -> List[InventoryRow]:
        rows: List[InventoryRow] = []
        for name in sorted(set(store_names)):
            rows.extend(self._inventory_index.get(name, []))
        return rows
