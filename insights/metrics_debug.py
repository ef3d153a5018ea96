from __future__ import annotations

from collections import Counter
from typing import Any, Dict, List

from insights.agencies import unpopulated_agencies
from insights.data import AgentDataset
from insights.records import AgencyRecord


def compute_debug(dataset: AgentDataset, agencies: List[AgencyRecord]) -> Dict[str, Any]:
    source_rows = dict(dataset.source_rows)
    names = Counter(a.name for a in dataset.agents)
    return {
        "row_counts": {
            "agents_source_rows": int(source_rows.get("agents", 0)),
            "agents_valid": len(dataset.agents),
            "player_source_rows": int(source_rows.get("player_investments", 0)),
            "players_valid": len(dataset.player_investments),
            "agencies": len(agencies),
        },
        "cleaning_checks": {
            "agents_dropped": int(source_rows.get("agents", 0)) - len(dataset.agents),
            "players_dropped": int(source_rows.get("player_investments", 0)) - len(dataset.player_investments),
        },
        # First non-zero row wins: agencies listed here never received values.
        "unpopulated_agencies": unpopulated_agencies(agencies),
        "duplicate_agent_names": sorted(name for name, count in names.items() if count > 1),
        "players_without_agent": sum(1 for p in dataset.player_investments if not p.agent_name),
    }
