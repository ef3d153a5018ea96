from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List

from insights.charts import metric_bar_chart, radar_bar_chart, to_vega_spec
from insights.data import AgentDataset
from insights.filters import MAX_COMPARE_AGENTS, ComparisonFilters
from insights.metrics_agent import formatted_ranks
from insights.records import AgentRecord

RADAR_LABELS = ["Dollar Index", "Win %", "Contracts Tracked", "Total Contract Value", "Value Capture %"]

_SORT_KEYS = {
    "dollar-index": (lambda a: a.dollar_index, True),
    "contracts-tracked": (lambda a: a.contracts_tracked, True),
    "contract-value": (lambda a: a.total_contract_value, True),
    "win-percentage": (lambda a: a.win_pct, True),
    "alphabetical": (lambda a: a.name.lower(), False),
}


def search_agents(agents: List[AgentRecord], filters: ComparisonFilters) -> List[AgentRecord]:
    results = list(agents)
    term = filters.search.lower()
    if term:
        results = [a for a in results if term in a.name.lower() or term in a.agency_name.lower()]
    if filters.min_contracts is not None:
        results = [a for a in results if a.contracts_tracked >= filters.min_contracts]
    if filters.min_contract_value_millions is not None:
        floor = filters.min_contract_value_millions * 1_000_000
        results = [a for a in results if a.total_contract_value >= floor]
    if filters.agency:
        results = [a for a in results if a.agency_name == filters.agency]
    key, reverse = _SORT_KEYS[filters.sort_by]
    return sorted(results, key=key, reverse=reverse)


def default_selection(agents: List[AgentRecord]) -> List[str]:
    top = sorted(agents, key=lambda a: a.dollar_index, reverse=True)
    return [a.name for a in top[:2]] if len(top) >= 2 else []


def _capture_pct(text: str) -> float:
    try:
        return min(abs(float(text.replace("%", "").strip())), 100.0)
    except ValueError:
        return 0.0


def radar_scores(selected: List[AgentRecord]) -> List[Dict[str, Any]]:
    """Normalize each metric to 0-100 against the selection (with floors)."""
    if not selected:
        return []
    max_index = max([a.dollar_index for a in selected] + [2])
    max_ct = max([a.contracts_tracked for a in selected] + [20])
    max_tcv = max([a.total_contract_value for a in selected] + [50_000_000])
    rows = []
    for a in selected:
        scores = [
            a.dollar_index / max_index * 100,
            a.win_pct * 100,
            a.contracts_tracked / max_ct * 100,
            a.total_contract_value / max_tcv * 100,
            _capture_pct(a.market_value_capture) if a.market_value_capture else 0.0,
        ]
        rows.extend({"agent": a.name, "metric": label, "score": score} for label, score in zip(RADAR_LABELS, scores))
    return rows


def compute_comparison(filters: ComparisonFilters, dataset: AgentDataset) -> Dict[str, Any]:
    by_name = {a.name: a for a in reversed(dataset.ranks)}
    names = [n for n in filters.selected_agents if n in by_name] or default_selection(dataset.ranks)
    selected = [by_name[n] for n in names[:MAX_COMPARE_AGENTS]]

    results = search_agents(dataset.ranks, filters)
    total = len(dataset.ranks)
    radar = radar_scores(selected)
    bars = [{"agent": a.name, "dollar_index": a.dollar_index, "total_contract_value": a.total_contract_value} for a in selected]

    return {
        "filters": asdict(filters),
        "result_count": len(results),
        "results": [a.to_dict() for a in results[: filters.result_limit]],
        "agencies": sorted({a.agency_name for a in dataset.ranks if a.agency_name}),
        "selected": [{**a.to_dict(), "formatted_ranks": formatted_ranks(a.ranks, total)} for a in selected],
        "radar": radar,
        "charts": {
            "radar": to_vega_spec(radar_bar_chart(radar)),
            "dollar_index": to_vega_spec(metric_bar_chart(bars, "agent", "dollar_index", "Dollar Index")),
            "total_contract_value": to_vega_spec(
                metric_bar_chart(bars, "agent", "total_contract_value", "Total Contract Value", fmt="$,.0f")
            ),
        },
    }
