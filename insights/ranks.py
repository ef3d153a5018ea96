from __future__ import annotations

from dataclasses import replace
from typing import Dict, List, Sequence

from insights.records import AgentRecord, RankSet

# rank field -> agent attribute
RANK_METRICS: Dict[str, str] = {
    "index_rank": "dollar_index",
    "win_rank": "win_pct",
    "ct_rank": "contracts_tracked",
    "tcv_rank": "total_contract_value",
    "tpv_rank": "total_player_value",
}


def _positions(values: Sequence[float]) -> List[int]:
    # sorted(reverse=True) is stable: equal values keep input order.
    order = sorted(range(len(values)), key=values.__getitem__, reverse=True)
    positions = [0] * len(values)
    for rank, idx in enumerate(order, start=1):
        positions[idx] = rank
    return positions


def compute_ranks(agents: Sequence[AgentRecord]) -> List[RankSet]:
    """Rank every agent on each metric independently (1 = highest).

    Ties keep input order, so each metric's ranks are a permutation of 1..n.
    Returned in the same order as ``agents``.
    """
    by_field = {
        field: _positions([getattr(a, attr) for a in agents])
        for field, attr in RANK_METRICS.items()
    }
    return [
        RankSet(agent_name=agent.name, **{field: by_field[field][pos] for field in RANK_METRICS})
        for pos, agent in enumerate(agents)
    ]


def attach_ranks(agents: Sequence[AgentRecord], ranks: Sequence[RankSet]) -> List[AgentRecord]:
    if len(agents) != len(ranks):
        raise ValueError(f"attach_ranks: {len(agents)} agents but {len(ranks)} rank sets")
    return [replace(agent, ranks=rank) for agent, rank in zip(agents, ranks)]
