from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

import altair as alt
import pandas as pd

alt.data_transformers.disable_max_rows()

NAVY = "#041E42"
GOLD = "#FFB81C"


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def vcp_trend_chart(vcp: Mapping[str, Optional[int]], title: str = "Year-by-Year VCP Trend") -> alt.Chart:
    df = pd.DataFrame({"season": list(vcp.keys()), "vcp": list(vcp.values())})
    return (
        alt.Chart(df, title=title)
        .mark_line(point={"filled": True, "color": NAVY}, color=GOLD, strokeWidth=3)
        .encode(
            x=alt.X("season:O", title="Season", sort=list(vcp.keys())),
            y=alt.Y("vcp:Q", title="VCP (%)", scale=alt.Scale(domain=[0, 200])),
            tooltip=[alt.Tooltip("season:O", title="Season"), alt.Tooltip("vcp:Q", title="VCP", format=".0f")],
        )
        .properties(height=280)
    )


def metric_bar_chart(rows: List[Dict[str, Any]], label: str, metric: str, title: str, fmt: str = ",.2f") -> alt.Chart:
    df = pd.DataFrame(rows, columns=[label, metric])
    return (
        alt.Chart(df, title=title)
        .mark_bar(color=NAVY)
        .encode(
            x=alt.X(f"{label}:N", title=None, sort=None),
            y=alt.Y(f"{metric}:Q", title=title),
            tooltip=[alt.Tooltip(f"{label}:N"), alt.Tooltip(f"{metric}:Q", format=fmt)],
        )
        .properties(height=260)
    )


def tier_count_chart(counts: Mapping[str, int], title: str) -> alt.Chart:
    df = pd.DataFrame({"tier": list(counts.keys()), "agents": list(counts.values())})
    return (
        alt.Chart(df, title=title)
        .mark_bar(color=GOLD)
        .encode(
            x=alt.X("tier:N", title="Tier", sort=list(counts.keys())),
            y=alt.Y("agents:Q", title="Agents"),
            tooltip=["tier", "agents"],
        )
        .properties(height=240)
    )


def radar_bar_chart(rows: List[Dict[str, Any]]) -> alt.Chart:
    """Grouped bars of 0-100 normalized metrics, one color per agent."""
    df = pd.DataFrame(rows, columns=["agent", "metric", "score"])
    return (
        alt.Chart(df, title="Normalized comparison")
        .mark_bar()
        .encode(
            x=alt.X("metric:N", title=None),
            xOffset="agent:N",
            y=alt.Y("score:Q", title="Score (0-100)", scale=alt.Scale(domain=[0, 100])),
            color=alt.Color("agent:N", title="Agent"),
            tooltip=["agent", "metric", alt.Tooltip("score:Q", format=".1f")],
        )
        .properties(height=280)
    )
