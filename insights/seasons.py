from __future__ import annotations

from typing import Dict, Iterable, List, Optional

import pandas as pd

from insights.parsing import round_half_up
from insights.records import SEASON_LABELS, PlayerInvestmentRecord


def compute_season_vcp(records: Iterable[PlayerInvestmentRecord]) -> Dict[str, Optional[int]]:
    """Value capture % per season: round(100 * cost / contribution).

    A season whose summed contribution is 0 maps to None.
    """
    rows = [
        {"season": line.label, "cost": line.cost, "pc": line.contribution}
        for record in records
        for line in record.seasons
    ]
    df = pd.DataFrame(rows, columns=["season", "cost", "pc"])
    df["cost"] = pd.to_numeric(df["cost"], errors="coerce")
    df["pc"] = pd.to_numeric(df["pc"], errors="coerce")
    totals = df.groupby("season")[["cost", "pc"]].sum()

    results: Dict[str, Optional[int]] = {}
    for season in SEASON_LABELS:
        if season not in totals.index:
            results[season] = None
            continue
        total_cost = float(totals.at[season, "cost"])
        total_pc = float(totals.at[season, "pc"])
        if total_pc == 0:
            results[season] = None
        else:
            results[season] = int(round_half_up(100 * total_cost / total_pc))
    return results


def players_for_agent(records: Iterable[PlayerInvestmentRecord], agent_name: str) -> List[PlayerInvestmentRecord]:
    return [r for r in records if r.agent_name == agent_name]


def players_for_agency(records: Iterable[PlayerInvestmentRecord], agency_name: str) -> List[PlayerInvestmentRecord]:
    return [r for r in records if r.agency_name == agency_name]


def top_clients(records: Iterable[PlayerInvestmentRecord], n: int = 3) -> List[PlayerInvestmentRecord]:
    return sorted(records, key=lambda r: r.total_cost, reverse=True)[:n]
