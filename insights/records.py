from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from insights.parsing import is_valid_key, parse_numeric, parse_percentage

# (label, cost column, contribution column)
SEASONS: Tuple[Tuple[str, str, str], ...] = (
    ("2018-19", "COST 18-19", "PC 18-19"),
    ("2019-20", "COST 19-20", "PC 19-20"),
    ("2020-21", "COST 20-21", "PC 20-21"),
    ("2021-22", "COST 21-22", "PC 21-22"),
    ("2022-23", "COST 22-23", "PC 22-23"),
    ("2023-24", "COST 23-24", "PC 23-24"),
)
SEASON_LABELS: Tuple[str, ...] = tuple(label for label, _, _ in SEASONS)

AGENT_KEY = "Agent Name"
AGENCY_KEY = "Agency Name"
PLAYER_KEY = "Combined Names"

RANK_COLUMNS = {
    "index_rank": "Index R",
    "win_rank": "WinR",
    "ct_rank": "CTR",
    "tcv_rank": "TCV R",
    "tpv_rank": "TPV R",
}


@dataclass(frozen=True)
class RankSet:
    index_rank: int = 0
    win_rank: int = 0
    ct_rank: int = 0
    tcv_rank: int = 0
    tpv_rank: int = 0
    agent_name: Optional[str] = None


@dataclass(frozen=True)
class AgentRecord:
    name: str
    agency_name: str = ""
    dollar_index: float = 0.0
    win_pct: float = 0.0
    contracts_tracked: int = 0
    total_contract_value: float = 0.0
    total_player_value: float = 0.0
    dollars_captured: float = 0.0
    market_value_capture: str = ""
    discount_rate: str = ""
    ranks: Optional[RankSet] = None

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        ranks = out.pop("ranks") or {}
        ranks.pop("agent_name", None)
        out.update(ranks)
        return out


@dataclass(frozen=True)
class AgencyRecord:
    name: str
    dollar_index: float = 0.0
    win_pct: float = 0.0
    contracts_tracked: int = 0
    total_contract_value: float = 0.0
    total_player_value: float = 0.0
    dollars_captured: float = 0.0
    market_value_capture: str = "0%"
    discount_rate: str = "0%"
    ranks: RankSet = field(default_factory=RankSet)

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        ranks = out.pop("ranks")
        ranks.pop("agent_name", None)
        out.update(ranks)
        return out


@dataclass(frozen=True)
class SeasonLine:
    label: str
    cost: float = 0.0
    contribution: float = 0.0


@dataclass(frozen=True)
class PlayerInvestmentRecord:
    player_name: str
    agent_name: str = ""
    agency_name: str = ""
    total_cost: float = 0.0
    total_contribution: float = 0.0
    seasons: Tuple[SeasonLine, ...] = ()
    dollars_captured: float = 0.0
    value_capture: str = ""

    def season(self, label: str) -> SeasonLine:
        for line in self.seasons:
            if line.label == label:
                return line
        return SeasonLine(label)

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out.pop("seasons")
        for line in self.seasons:
            out[f"cost_{line.label}"] = line.cost
            out[f"pc_{line.label}"] = line.contribution
        return out


def normalize_headers(row: Mapping[Any, Any]) -> Dict[str, Any]:
    """Strip header keys once; a non-blank value beats a blank duplicate."""
    out: Dict[str, Any] = {}
    for key, value in row.items():
        name = str(key).strip()
        if name in out and not _is_blank(out[name]):
            continue
        out[name] = value
    return out


def _is_blank(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and value != value:
        return True
    return isinstance(value, str) and not value.strip()


def _text(value: object, default: str = "") -> str:
    if _is_blank(value):
        return default
    return str(value).strip()


def _count(value: object) -> int:
    return int(parse_numeric(value))


def is_valid_row(row: Mapping[Any, Any], key: str) -> bool:
    return is_valid_key(normalize_headers(row).get(key))


def map_agent_row(row: Mapping[Any, Any]) -> AgentRecord:
    r = normalize_headers(row)
    return AgentRecord(
        name=_text(r.get(AGENT_KEY)),
        agency_name=_text(r.get(AGENCY_KEY)),
        dollar_index=parse_numeric(r.get("Dollar Index")),
        win_pct=parse_percentage(r.get("Won%")),
        contracts_tracked=_count(r.get("CT")),
        total_contract_value=parse_numeric(r.get("Total Contract Value")),
        total_player_value=parse_numeric(r.get("Total Player Value")),
        dollars_captured=parse_numeric(r.get("Dollars Captured Above/ Below Value")),
        market_value_capture=_text(r.get("Market Value Capture %")),
        discount_rate=_text(r.get("Discount Rate")),
    )


def map_agency_source_row(row: Mapping[Any, Any]) -> AgencyRecord:
    r = normalize_headers(row)
    ranks = RankSet(**{attr: _count(r.get(col)) for attr, col in RANK_COLUMNS.items()})
    return AgencyRecord(
        name=_text(r.get(AGENCY_KEY)),
        dollar_index=parse_numeric(r.get("Dollar Index")),
        win_pct=parse_percentage(r.get("Won%")),
        contracts_tracked=_count(r.get("CT")),
        total_contract_value=parse_numeric(r.get("Total Contract Value")),
        total_player_value=parse_numeric(r.get("Total Player Value")),
        dollars_captured=parse_numeric(r.get("Dollars Captured Above/ Below Value")),
        market_value_capture=_text(r.get("Market Value Capture %")),
        discount_rate=_text(r.get("Discount Rate")),
        ranks=ranks,
    )


def map_player_investment_row(row: Mapping[Any, Any]) -> PlayerInvestmentRecord:
    r = normalize_headers(row)
    seasons = tuple(
        SeasonLine(label, parse_numeric(r.get(cost_col)), parse_numeric(r.get(pc_col)))
        for label, cost_col, pc_col in SEASONS
    )
    return PlayerInvestmentRecord(
        player_name=_text(r.get(PLAYER_KEY)),
        agent_name=_text(r.get(AGENT_KEY)),
        agency_name=_text(r.get(AGENCY_KEY)),
        total_cost=parse_numeric(r.get("Total Cost")),
        total_contribution=parse_numeric(r.get("Total PC")),
        seasons=seasons,
        dollars_captured=parse_numeric(r.get("Dollars Captured Above/ Below Value")),
        value_capture=_text(r.get("Value Capture %")),
    )


def map_agents(rows: Iterable[Mapping[Any, Any]]) -> List[AgentRecord]:
    return [map_agent_row(row) for row in rows if is_valid_row(row, AGENT_KEY)]


def map_player_investments(rows: Iterable[Mapping[Any, Any]]) -> List[PlayerInvestmentRecord]:
    return [map_player_investment_row(row) for row in rows if is_valid_row(row, PLAYER_KEY)]
