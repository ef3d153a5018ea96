from __future__ import annotations

from typing import Any, Dict, List, Optional

from insights import data
from insights.charts import to_vega_spec, vcp_trend_chart
from insights.data import AgentDataset, find_agent
from insights.formatting import format_rank
from insights.parsing import headshot_url, round_half_up
from insights.records import PlayerInvestmentRecord, RankSet
from insights.seasons import compute_season_vcp, players_for_agent, top_clients


def last_name_key(name: str) -> str:
    parts = name.split()
    return parts[-1].lower() if parts else ""


def agent_names(dataset: AgentDataset) -> List[str]:
    return sorted((a.name for a in dataset.ranks), key=last_name_key)


def client_payload(record: PlayerInvestmentRecord) -> Dict[str, Any]:
    out = record.to_dict()
    out["headshot_url"] = headshot_url(record.player_name, data.HEADSHOTS_PATH)
    out["vcp"] = int(round_half_up(100 * record.total_cost / record.total_contribution)) if record.total_contribution else None
    return out


def formatted_ranks(ranks: Optional[RankSet], total: int) -> Dict[str, str]:
    ranks = ranks or RankSet()
    return {
        "index_rank": format_rank(ranks.index_rank, total),
        "win_rank": format_rank(ranks.win_rank, total),
        "ct_rank": format_rank(ranks.ct_rank, total),
        "tcv_rank": format_rank(ranks.tcv_rank, total),
        "tpv_rank": format_rank(ranks.tpv_rank, total),
    }


def compute_agent_dashboard(dataset: AgentDataset, agent_name: Optional[str] = None) -> Dict[str, Any]:
    """Payload for one agent; an unknown or missing name falls back to the first agent."""
    agent = find_agent(dataset.ranks, agent_name)
    if agent is None:
        return {"selected": None, "requested": agent_name, "agent_names": []}

    players = players_for_agent(dataset.player_investments, agent.name)
    vcp = compute_season_vcp(players)
    clients = sorted(players, key=lambda r: r.total_cost, reverse=True)
    return {
        "selected": agent.name,
        "requested": agent_name,
        "matched": agent_name == agent.name,
        "agent": agent.to_dict(),
        "ranks": formatted_ranks(agent.ranks, len(dataset.ranks)),
        "vcp": vcp,
        "top_clients": [client_payload(r) for r in top_clients(players)],
        "clients": [client_payload(r) for r in clients],
        "agent_names": agent_names(dataset),
        "charts": {"vcp_trend": to_vega_spec(vcp_trend_chart(vcp))},
    }
