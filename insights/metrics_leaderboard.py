from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

from insights.data import AgentDataset
from insights.filters import LeaderboardFilters
from insights.parsing import is_valid_key


def compute_leaderboard(filters: LeaderboardFilters, dataset: AgentDataset) -> Dict[str, Any]:
    excluded = set(filters.excluded_agents)
    eligible = [
        a
        for a in dataset.ranks
        if is_valid_key(a.name)
        and a.name not in excluded
        and not (filters.min_contracts_only and a.contracts_tracked < filters.min_contracts)
    ]
    ordered = sorted(eligible, key=lambda a: a.dollar_index, reverse=True)[: filters.top_n]

    rows = []
    for position, agent in enumerate(ordered, start=1):
        row = agent.to_dict()
        row["position"] = position
        rows.append(row)
    return {
        "filters": asdict(filters),
        "population": len(dataset.ranks),
        "eligible": len(eligible),
        "rows": rows,
    }
