from __future__ import annotations

from typing import Any, Dict, List, Optional

from insights.charts import to_vega_spec, vcp_trend_chart
from insights.data import AgentDataset, find_agency
from insights.metrics_agent import client_payload, formatted_ranks
from insights.records import AgencyRecord
from insights.seasons import compute_season_vcp, players_for_agency, top_clients


def compute_agency_dashboard(
    agencies: List[AgencyRecord], dataset: AgentDataset, agency_name: Optional[str] = None
) -> Dict[str, Any]:
    agency = find_agency(agencies, agency_name)
    if agency is None:
        return {"selected": None, "requested": agency_name, "agency_names": []}

    players = players_for_agency(dataset.player_investments, agency.name)
    vcp = compute_season_vcp(players)

    agents: Dict[str, int] = {}
    for p in players:
        agents[p.agent_name] = agents.get(p.agent_name, 0) + 1

    return {
        "selected": agency.name,
        "requested": agency_name,
        "matched": agency_name == agency.name,
        "agency": agency.to_dict(),
        "ranks": formatted_ranks(agency.ranks, len(agencies)),
        "vcp": vcp,
        "agents": [{"agent_name": name, "clients": count} for name, count in agents.items()],
        "top_clients": [client_payload(r) for r in top_clients(players)],
        "agency_names": [a.name for a in agencies],
        "charts": {"vcp_trend": to_vega_spec(vcp_trend_chart(vcp))},
    }
