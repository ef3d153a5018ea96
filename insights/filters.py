from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

EXCLUDED_AGENTS = (
    "Patrik Aronsson",
    "Chris McAlpine",
    "David Kaye",
    "Thomas Lynn",
    "Patrick Sullivan",
)

SORT_OPTIONS = ("dollar-index", "contracts-tracked", "contract-value", "win-percentage", "alphabetical")
CLASSIFICATION_METRICS = ("dollar-index", "win-percentage", "contracts-tracked", "total-contract-value")

MAX_COMPARE_AGENTS = 3


@dataclass(frozen=True)
class LeaderboardFilters:
    min_contracts_only: bool = False
    min_contracts: int = 10
    top_n: int = 90
    excluded_agents: List[str] = field(default_factory=lambda: list(EXCLUDED_AGENTS))


@dataclass(frozen=True)
class ComparisonFilters:
    search: str = ""
    min_contracts: Optional[int] = None
    min_contract_value_millions: Optional[float] = None
    agency: str = ""
    sort_by: str = "dollar-index"
    selected_agents: List[str] = field(default_factory=list)
    result_limit: int = 20


def _as_int(value: object) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _as_float(value: object) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _as_str_list(values: Optional[Iterable[object]]) -> List[str]:
    if not values:
        return []
    out: List[str] = []
    for v in values:
        if v is None:
            continue
        s = str(v).strip()
        if s and s not in out:
            out.append(s)
    return out


def normalize_leaderboard_filters(raw: dict) -> LeaderboardFilters:
    top_n = _as_int(raw.get("top_n"))
    top_n = 90 if top_n is None else max(1, min(500, top_n))
    min_contracts = _as_int(raw.get("min_contracts"))
    excluded = raw.get("excluded_agents")
    return LeaderboardFilters(
        min_contracts_only=bool(raw.get("min_contracts_only", False)),
        min_contracts=10 if min_contracts is None else max(0, min_contracts),
        top_n=top_n,
        excluded_agents=list(EXCLUDED_AGENTS) if excluded is None else _as_str_list(excluded),
    )


def normalize_comparison_filters(raw: dict) -> ComparisonFilters:
    sort_by = str(raw.get("sort_by") or "dollar-index")
    if sort_by not in SORT_OPTIONS:
        sort_by = "dollar-index"

    limit = _as_int(raw.get("result_limit"))
    limit = 20 if limit is None else max(1, min(200, limit))

    return ComparisonFilters(
        search=(raw.get("search") or "").strip(),
        min_contracts=_as_int(raw.get("min_contracts")),
        min_contract_value_millions=_as_float(raw.get("min_contract_value_millions")),
        agency=(raw.get("agency") or "").strip(),
        sort_by=sort_by,
        selected_agents=_as_str_list(raw.get("selected_agents"))[:MAX_COMPARE_AGENTS],
        result_limit=limit,
    )


def normalize_metric(metric: Optional[str]) -> str:
    return metric if metric in CLASSIFICATION_METRICS else "dollar-index"
