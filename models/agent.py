import re
from dataclasses import dataclass
from typing import FrozenSet

_PARENTHETICAL = re.compile(r"\([^)]*\)")


def normalize_agent_name(name) -> str:
    """Canonical key for an agent label: trimmed, no "(...)" suffixes, casefolded."""
    if name is None:
        return ""
    stripped = _PARENTHETICAL.sub("", str(name))
    return " ".join(stripped.split()).casefold()


@dataclass(frozen=True)
class Agent:
    agent_id: str
    display_name: str
    office: str = ""
    department: str = ""
    qualification: str = ""

    @property
    def match_keys(self) -> FrozenSet[str]:
        """Normalized labels under which stores and activity rows may refer to this agent."""
        keys = {normalize_agent_name(self.agent_id), normalize_agent_name(self.display_name)}
        keys.discard("")
        return frozenset(keys)
