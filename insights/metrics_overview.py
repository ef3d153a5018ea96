from __future__ import annotations

from typing import Any, Dict, List

from insights.charts import to_vega_spec, vcp_trend_chart
from insights.data import AgentDataset
from insights.records import AgencyRecord
from insights.seasons import compute_season_vcp


def compute_overview(dataset: AgentDataset, agencies: List[AgencyRecord], *, top_n: int = 5) -> Dict[str, Any]:
    ranked = dataset.ranks
    top = sorted(ranked, key=lambda a: a.dollar_index, reverse=True)[:top_n]
    league_vcp = compute_season_vcp(dataset.player_investments)

    total_contract_value = sum(a.total_contract_value for a in dataset.agents)
    total_player_value = sum(a.total_player_value for a in dataset.agents)
    return {
        "kpis": {
            "agents": len(dataset.agents),
            "agencies": len(agencies),
            "players": len(dataset.player_investments),
            "total_contract_value": total_contract_value,
            "total_player_value": total_player_value,
        },
        "top_agents": [a.to_dict() for a in top],
        "league_vcp": league_vcp,
        "charts": {"league_vcp_trend": to_vega_spec(vcp_trend_chart(league_vcp, title="League VCP by Season"))},
    }
