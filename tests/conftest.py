from __future__ import annotations

from pathlib import Path
from typing import Dict, List

import pandas as pd
import pytest

from insights import data
from insights.data import build_agent_dataset


def agent_row(name, agency, index, won, ct, tcv="$0", tpv="$0", captured="$0", padded=True) -> Dict[str, str]:
    pad = (lambda h: f" {h} ") if padded else (lambda h: h)
    return {
        "Agent Name": name,
        "Agency Name": agency,
        pad("Dollar Index"): index,
        "Won%": won,
        "CT": ct,
        pad("Total Contract Value"): tcv,
        pad("Total Player Value"): tpv,
        pad("Dollars Captured Above/ Below Value"): captured,
        "Market Value Capture %": "90%",
        "Discount Rate": "10%",
    }


def piba_row(player, agent, agency, seasons: Dict[str, tuple], total_cost="$0", total_pc="$0") -> Dict[str, str]:
    row = {
        "Combined Names": player,
        "Agent Name": agent,
        "Agency Name": agency,
        " Total Cost ": total_cost,
        " Total PC ": total_pc,
        " Dollars Captured Above/ Below Value ": "$0",
        "Value Capture %": "100%",
    }
    for short in ("18-19", "19-20", "20-21", "21-22", "22-23", "23-24"):
        cost, pc = seasons.get(short, ("$0", "$0"))
        row[f" COST {short} "] = cost
        row[f" PC {short} "] = pc
    return row


def agency_row(name, index, won="50%", ct="10", tcv="$1,000,000", index_rank="1") -> Dict[str, str]:
    return {
        "Agency Name": name,
        " Dollar Index ": index,
        "Won%": won,
        "CT": ct,
        " Total Contract Value ": tcv,
        " Total Player Value ": "$900,000",
        " Dollars Captured Above/ Below Value ": "($100,000)",
        "Market Value Capture %": "90%",
        "Discount Rate": "10%",
        "Index R": index_rank,
        "WinR": "2",
        "CTR": "3",
        "TCV R": "4",
        "TPV R": "5",
    }


@pytest.fixture
def agent_rows() -> List[Dict[str, str]]:
    return [
        agent_row("Alice Archer", "North Sports", "1.60", "62%", "32", "$120,000,000", "$130,000,000", "$10,000,000"),
        agent_row("Bob Baker", "North Sports", "1.10", "52.5%", "12", "$30,000,000", "$28,000,000", "($2,000,000)"),
        agent_row("Cara Cole", "South Group", "0.75", "40%", "4", "$5,000,000", "$4,000,000", "($1,000,000)", padded=False),
        agent_row("Patrik Aronsson", "South Group", "2.10", "70%", "3", "$2,000,000", "$3,000,000", "$1,000,000"),
        agent_row("(blank)", "", "5.00", "90%", "99", "$1", "$1", "$1"),
        agent_row("Grand Total", "", "1.00", "50%", "51", "$157,000,001", "$165,000,001", "$8,000,001"),
    ]


@pytest.fixture
def piba_rows() -> List[Dict[str, str]]:
    return [
        piba_row("Zed Zane", "Alice Archer", "North Sports", {"18-19": ("$150", "$100"), "19-20": ("$50", "$0")}, "$5,000,000", "$4,000,000"),
        piba_row("Yan Young", "Alice Archer", "North Sports", {"18-19": ("$50", "$100")}, "$7,000,000", "$8,000,000"),
        piba_row("Xi Xu", "Bob Baker", "North Sports", {"20-21": ("$300", "$200")}, "$1,000,000", "$1,000,000"),
        piba_row("Will Wu", "Bob Baker", "North Sports", {}, "$3,000,000", "$2,000,000"),
        piba_row("Grand Total", "", "", {"18-19": ("$999", "$999")}),
    ]


@pytest.fixture
def agency_rows() -> List[Dict[str, str]]:
    return [
        agency_row("North Sports", "0", ct="1"),
        agency_row("North Sports", "1.25", ct="20", index_rank="2"),
        agency_row("North Sports", "0.90", ct="99"),
        agency_row("South Group", "0.95", ct="8"),
        agency_row("Empty Agency", "0"),
        agency_row("(blank)", "3.00"),
        agency_row("Grand Total", "1.00"),
    ]


@pytest.fixture
def dataset(agent_rows, piba_rows):
    return build_agent_dataset(agent_rows, piba_rows)


def write_csv(path: Path, rows: List[Dict[str, str]]) -> None:
    pd.DataFrame(rows).to_csv(path, index=False)


@pytest.fixture
def data_dir(tmp_path, monkeypatch, agent_rows, piba_rows, agency_rows) -> Path:
    write_csv(tmp_path / data.AGENTS_FILE, agent_rows)
    write_csv(tmp_path / data.PIBA_FILE, piba_rows)
    write_csv(tmp_path / data.AGENCIES_FILE, agency_rows)
    monkeypatch.setattr(data, "DATA_DIR", tmp_path)
    monkeypatch.setattr(data, "DATA_URL", "")
    data.clear_cache()
    yield tmp_path
    data.clear_cache()
