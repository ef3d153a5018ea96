from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from insights.charts import tier_count_chart, to_vega_spec
from insights.data import AgentDataset
from insights.formatting import format_currency, format_dollar_index, format_percentage
from insights.records import AgentRecord


@dataclass(frozen=True)
class Tier:
    name: str
    min: Optional[float] = None
    max: Optional[float] = None

    def contains(self, value: float) -> bool:
        if self.min is not None and value < self.min:
            return False
        if self.max is not None and value >= self.max:
            return False
        return True


def _tiers(elite: float, great: float, good: float, average: float) -> List[Tier]:
    return [
        Tier("Elite", min=elite),
        Tier("Great", min=great, max=elite),
        Tier("Good", min=good, max=great),
        Tier("Average", min=average, max=good),
        Tier("Below Average", max=average),
    ]


THRESHOLDS: Dict[str, List[Tier]] = {
    "dollar-index": _tiers(1.5, 1.2, 1.0, 0.8),
    "win-percentage": _tiers(0.6, 0.55, 0.5, 0.45),
    "contracts-tracked": _tiers(30, 20, 10, 5),
    "total-contract-value": _tiers(100_000_000, 50_000_000, 25_000_000, 10_000_000),
}

METRIC_FIELDS = {
    "dollar-index": "dollar_index",
    "win-percentage": "win_pct",
    "contracts-tracked": "contracts_tracked",
    "total-contract-value": "total_contract_value",
}

METRIC_LABELS = {
    "dollar-index": "Dollar Index",
    "win-percentage": "Win Percentage",
    "contracts-tracked": "Contracts Tracked",
    "total-contract-value": "Total Contract Value",
}


def classify(value: float, tiers: Sequence[Tier]) -> Tier:
    for tier in tiers:
        if tier.contains(value):
            return tier
    return tiers[-1]


def format_metric(metric: str, value: float) -> str:
    if metric == "dollar-index":
        return format_dollar_index(value)
    if metric == "win-percentage":
        return format_percentage(value)
    if metric == "total-contract-value":
        return format_currency(value)
    return str(int(value))


def group_by_tier(agents: Sequence[AgentRecord], metric: str) -> Dict[str, List[AgentRecord]]:
    tiers = THRESHOLDS[metric]
    attr = METRIC_FIELDS[metric]
    grouped: Dict[str, List[AgentRecord]] = {t.name: [] for t in tiers}
    for agent in agents:
        grouped[classify(getattr(agent, attr), tiers).name].append(agent)
    return grouped


def compute_classifications(dataset: AgentDataset, metric: str = "dollar-index") -> Dict[str, Any]:
    attr = METRIC_FIELDS[metric]
    grouped = group_by_tier(dataset.ranks, metric)
    tiers = []
    for tier in THRESHOLDS[metric]:
        members = sorted(grouped[tier.name], key=lambda a: getattr(a, attr), reverse=True)
        tiers.append(
            {
                "name": tier.name,
                "min": tier.min,
                "max": tier.max,
                "agents": [
                    {**a.to_dict(), "display_value": format_metric(metric, getattr(a, attr))}
                    for a in members
                ],
            }
        )
    counts = {t["name"]: len(t["agents"]) for t in tiers}
    return {
        "metric": metric,
        "label": METRIC_LABELS[metric],
        "tiers": tiers,
        "counts": counts,
        "charts": {"tier_counts": to_vega_spec(tier_count_chart(counts, f"Agents by {METRIC_LABELS[metric]} tier"))},
    }
