from __future__ import annotations

import asyncio
import io
import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import pandas as pd
import requests

from insights.agencies import aggregate_agencies
from insights.ranks import attach_ranks, compute_ranks
from insights.records import (
    AgencyRecord,
    AgentRecord,
    PlayerInvestmentRecord,
    map_agents,
    map_player_investments,
)

logger = logging.getLogger(__name__)

DATA_DIR = Path(os.getenv("INSIGHTS_DATA_DIR", Path(__file__).resolve().parents[1] / "data"))
DATA_URL = os.getenv("INSIGHTS_DATA_URL", "").rstrip("/")
HEADSHOTS_PATH = os.getenv("INSIGHTS_HEADSHOTS_PATH", "/headshots_cache/")

AGENTS_FILE = "Agents Tab.csv"
AGENCIES_FILE = "Agencies Tab.csv"
PIBA_FILE = "PIBA.csv"

LOAD_ERROR_MESSAGE = "Failed to load data. Please try again later."

Signature = Tuple[Tuple[str, float], ...]


class DataLoadError(RuntimeError):
    """A source table could not be fetched or parsed."""


@dataclass(frozen=True)
class AgentDataset:
    agents: List[AgentRecord] = field(default_factory=list)
    ranks: List[AgentRecord] = field(default_factory=list)
    player_investments: List[PlayerInvestmentRecord] = field(default_factory=list)
    source_rows: Dict[str, int] = field(default_factory=dict)


# ---------------- Reading ----------------
def _parse_csv(source: Any, name: str) -> pd.DataFrame:
    try:
        return pd.read_csv(source, dtype=str, keep_default_na=False, skip_blank_lines=True)
    except pd.errors.EmptyDataError:
        return pd.DataFrame()
    except (pd.errors.ParserError, UnicodeDecodeError, ValueError) as exc:
        raise DataLoadError(f"Could not parse {name}: {exc}") from exc


def _fetch_text(url: str) -> str:
    try:
        response = requests.get(url)
    except requests.RequestException as exc:
        raise DataLoadError(f"Could not fetch {url}: {exc}") from exc
    if response.status_code != 200:
        raise DataLoadError(f"Could not fetch {url}: HTTP {response.status_code}")
    return response.text


def read_table(name: str) -> pd.DataFrame:
    """Read one source table as text cells, from DATA_URL when set else DATA_DIR."""
    if DATA_URL:
        url = f"{DATA_URL}/{quote(name)}"
        df = _parse_csv(io.StringIO(_fetch_text(url)), name)
    else:
        path = DATA_DIR / name
        if not path.exists():
            raise DataLoadError(f"Could not find {path}")
        df = _parse_csv(path, name)
    logger.info("read %s: %d rows", name, len(df))
    return df


def table_rows(df: pd.DataFrame) -> List[Dict[str, Any]]:
    return df.to_dict(orient="records")


def file_signature(names: List[str]) -> Signature:
    out = []
    for name in names:
        path = DATA_DIR / name
        out.append((str(path), path.stat().st_mtime if path.exists() else -1.0))
    return tuple(out)


# ---------------- Building ----------------
def build_agent_dataset(agent_rows: List[Dict[str, Any]], piba_rows: List[Dict[str, Any]]) -> AgentDataset:
    agents = map_agents(agent_rows)
    ranked = attach_ranks(agents, compute_ranks(agents))
    players = map_player_investments(piba_rows)
    logger.info(
        "agent dataset: %d/%d agents, %d/%d player rows",
        len(agents),
        len(agent_rows),
        len(players),
        len(piba_rows),
    )
    return AgentDataset(
        agents=agents,
        ranks=ranked,
        player_investments=players,
        source_rows={"agents": len(agent_rows), "player_investments": len(piba_rows)},
    )


def build_agencies(agency_rows: List[Dict[str, Any]]) -> List[AgencyRecord]:
    agencies = sorted(aggregate_agencies(agency_rows), key=lambda a: a.name)
    logger.info("agencies: %d from %d rows", len(agencies), len(agency_rows))
    return agencies


@lru_cache(maxsize=4)
def _load_agent_data_cached(files_sig: Signature) -> AgentDataset:
    return build_agent_dataset(table_rows(read_table(AGENTS_FILE)), table_rows(read_table(PIBA_FILE)))


@lru_cache(maxsize=4)
def _load_agency_data_cached(files_sig: Signature) -> Tuple[AgencyRecord, ...]:
    return tuple(build_agencies(table_rows(read_table(AGENCIES_FILE))))


# ---------------- Public API (Streamlit + FastAPI use) ----------------
def load_agent_data() -> AgentDataset:
    if DATA_URL:
        return build_agent_dataset(table_rows(read_table(AGENTS_FILE)), table_rows(read_table(PIBA_FILE)))
    return _load_agent_data_cached(file_signature([AGENTS_FILE, PIBA_FILE]))


def load_agency_data() -> List[AgencyRecord]:
    if DATA_URL:
        return build_agencies(table_rows(read_table(AGENCIES_FILE)))
    return list(_load_agency_data_cached(file_signature([AGENCIES_FILE])))


async def fetch_agent_data() -> AgentDataset:
    return await asyncio.to_thread(load_agent_data)


async def fetch_agency_data() -> List[AgencyRecord]:
    return await asyncio.to_thread(load_agency_data)


def clear_cache() -> None:
    _load_agent_data_cached.cache_clear()
    _load_agency_data_cached.cache_clear()


def find_agent(agents: List[AgentRecord], name: Optional[str]) -> Optional[AgentRecord]:
    """Agent by exact name, else the first agent (None when empty)."""
    if name:
        for agent in agents:
            if agent.name == name:
                return agent
    return agents[0] if agents else None


def find_agency(agencies: List[AgencyRecord], name: Optional[str]) -> Optional[AgencyRecord]:
    if name:
        for agency in agencies:
            if agency.name == name:
                return agency
    return agencies[0] if agencies else None
