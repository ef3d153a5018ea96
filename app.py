from contextlib import contextmanager
from typing import Optional

import pandas as pd
import streamlit as st

from insights import data as insights_data
from insights.data import LOAD_ERROR_MESSAGE, AgentDataset
from insights.filters import CLASSIFICATION_METRICS, SORT_OPTIONS, normalize_comparison_filters, normalize_leaderboard_filters
from insights.formatting import (
    format_currency,
    format_delivery_value,
    format_dollar_index,
    format_percentage,
    format_value_capture_percentage,
)
from insights.metrics_agency import compute_agency_dashboard
from insights.metrics_agent import agent_names, compute_agent_dashboard
from insights.metrics_classifications import METRIC_LABELS, compute_classifications
from insights.metrics_comparison import compute_comparison
from insights.metrics_debug import compute_debug
from insights.metrics_leaderboard import compute_leaderboard
from insights.metrics_overview import compute_overview
from insights.session import session_state

PLACEHOLDER_IMAGE_URL = "https://upload.wikimedia.org/wikipedia/en/3/3a/05_NHL_Shield.svg"


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .app-top-bar {padding: 6px 0 4px;border-bottom: 1px solid #e5e7eb;margin-bottom: 10px;}
        .app-top-bar .breadcrumb {color: #6b7280;font-size: 0.9rem;margin-bottom: 2px;}
        .app-top-bar .page-title {font-size: 1.4rem;font-weight: 700;color: #041E42;}
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #041E42;margin-bottom: 8px;}
        .headshot {width: 160px; height: 160px; display: block; margin: auto; border-radius: 8px;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(f"<div class='card'><div class='card-title'>{title}</div>", unsafe_allow_html=True)
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def render_page_header(title: str, breadcrumb: str, export_df: Optional[pd.DataFrame] = None, export_name: str = "export.csv"):
    inject_base_styles()
    c1, c2 = st.columns([8, 2])
    with c1:
        st.markdown(
            f"<div class='app-top-bar'><div class='breadcrumb'>{breadcrumb}</div><div class='page-title'>{title}</div></div>",
            unsafe_allow_html=True,
        )
    with c2:
        if st.button("Refresh"):
            insights_data.clear_cache()
            st.session_state.pop("agent_data", None)
            st.session_state.pop("agency_data", None)
            st.rerun()
        if export_df is not None and not export_df.empty:
            st.download_button(
                "Export CSV",
                data=export_df.to_csv(index=False).encode("utf-8"),
                file_name=export_name,
                mime="text/csv",
            )


def render_clients(clients):
    cols = st.columns(3)
    for idx, client in enumerate(clients):
        with cols[idx % 3]:
            st.markdown(
                f"<img class='headshot' src='{client['headshot_url'] or PLACEHOLDER_IMAGE_URL}' "
                f"onerror=\"this.src='{PLACEHOLDER_IMAGE_URL}'\"/>",
                unsafe_allow_html=True,
            )
            st.markdown(f"**{client['player_name']}**")
            st.write(
                {
                    "Six-Year Agent Delivery": format_delivery_value(client["dollars_captured"]),
                    "Six-Year Player Cost": format_currency(client["total_cost"]),
                    "Six-Year Player Value": format_currency(client["total_contribution"]),
                    "Value Capture": format_value_capture_percentage(client["vcp"]),
                }
            )


def render_vcp(payload):
    st.vega_lite_chart(payload["charts"]["vcp_trend"], use_container_width=True)


# ---------- Data ----------
st.set_page_config(page_title="Agent Insights Dashboard", layout="wide")
inject_base_styles()
st.title("Agent Insights Dashboard")
st.caption("Agent and agency contract value, rankings and value capture.")

agent_session = session_state(st.session_state, "agent_data")
agency_session = session_state(st.session_state, "agency_data")
if agent_session.data is None and agent_session.error is None:
    agent_session.load(insights_data.load_agent_data)
if agency_session.data is None and agency_session.error is None:
    agency_session.load(insights_data.load_agency_data)

if agent_session.error is not None or agency_session.error is not None:
    st.error(LOAD_ERROR_MESSAGE)
    st.stop()

dataset: AgentDataset = agent_session.data
agencies = agency_session.data
if not dataset.agents:
    st.error("No agents found. Place 'Agents Tab.csv', 'Agencies Tab.csv' and 'PIBA.csv' in the data directory.")
    st.stop()

query_agent = st.query_params.get("agent")
query_agency = st.query_params.get("agency")

with st.sidebar:
    st.markdown("### Navigate")
    default_page = "Agent Dashboard" if query_agent else ("Agency Dashboard" if query_agency else "Overview")
    pages = ["Overview", "Agent Dashboard", "Agency Dashboard", "Leaderboard", "Classifications", "Agent Comparison", "Data Quality"]
    current_page = st.radio("Navigate", pages, index=pages.index(default_page))


# ----- Page renderers -----
def render_overview_page():
    payload = compute_overview(dataset, agencies)
    render_page_header("Overview", "Home / Overview")
    kpis = payload["kpis"]
    cols = st.columns(5)
    cols[0].metric("Agents", kpis["agents"])
    cols[1].metric("Agencies", kpis["agencies"])
    cols[2].metric("Players", kpis["players"])
    cols[3].metric("Total Contract Value", format_currency(kpis["total_contract_value"]))
    cols[4].metric("Total Player Value", format_currency(kpis["total_player_value"]))
    with card("Top agents by Dollar Index"):
        top = pd.DataFrame(payload["top_agents"])
        if not top.empty:
            st.dataframe(top[["name", "agency_name", "dollar_index", "contracts_tracked"]], hide_index=True)
    with card("League value capture"):
        st.vega_lite_chart(payload["charts"]["league_vcp_trend"], use_container_width=True)


def render_agent_page():
    names = agent_names(dataset)
    selected = st.selectbox("Select an agent", names, index=names.index(query_agent) if query_agent in names else 0) if names else None
    payload = compute_agent_dashboard(dataset, selected)
    if payload["selected"] is None:
        render_page_header("Agent Dashboard", "Home / Agent Dashboard")
        st.info("No agents found in the agent data.")
        return
    render_page_header(payload["selected"], "Home / Agent Dashboard", export_df=pd.DataFrame(payload["clients"]), export_name="clients.csv")
    agent = payload["agent"]
    ranks = payload["ranks"]
    st.markdown(f"**Agency:** {agent['agency_name']}")
    cols = st.columns(5)
    cols[0].metric("Dollar Index", format_dollar_index(agent["dollar_index"]), ranks["index_rank"], delta_color="off")
    cols[1].metric("Win %", format_percentage(agent["win_pct"]), ranks["win_rank"], delta_color="off")
    cols[2].metric("Contracts Tracked", agent["contracts_tracked"], ranks["ct_rank"], delta_color="off")
    cols[3].metric("Total Contract Value", format_currency(agent["total_contract_value"]), ranks["tcv_rank"], delta_color="off")
    cols[4].metric("Total Player Value", format_currency(agent["total_player_value"]), ranks["tpv_rank"], delta_color="off")
    with card("Year-by-Year VCP Trend"):
        render_vcp(payload)
    with card("Top clients"):
        render_clients(payload["top_clients"])


def render_agency_page():
    names = [a.name for a in agencies]
    selected = st.selectbox("Select an agency", names, index=names.index(query_agency) if query_agency in names else 0) if names else None
    payload = compute_agency_dashboard(agencies, dataset, selected)
    if payload["selected"] is None:
        render_page_header("Agency Dashboard", "Home / Agency Dashboard")
        st.info("No agencies found in the agency data.")
        return
    render_page_header(payload["selected"], "Home / Agency Dashboard")
    agency = payload["agency"]
    ranks = payload["ranks"]
    cols = st.columns(4)
    cols[0].metric("Dollar Index", format_dollar_index(agency["dollar_index"]), ranks["index_rank"], delta_color="off")
    cols[1].metric("Win %", format_percentage(agency["win_pct"]), ranks["win_rank"], delta_color="off")
    cols[2].metric("Contracts Tracked", agency["contracts_tracked"], ranks["ct_rank"], delta_color="off")
    cols[3].metric("Total Contract Value", format_currency(agency["total_contract_value"]), ranks["tcv_rank"], delta_color="off")
    with card("Year-by-Year VCP Trend"):
        render_vcp(payload)
    with card(f"Agency Agents ({len(payload['agents'])})"):
        st.dataframe(pd.DataFrame(payload["agents"]), hide_index=True)
    with card("Top clients"):
        render_clients(payload["top_clients"])


def render_leaderboard_page():
    min_only = st.checkbox("Only agents with at least 10 contracts tracked", value=False)
    payload = compute_leaderboard(normalize_leaderboard_filters({"min_contracts_only": min_only}), dataset)
    rows = pd.DataFrame(payload["rows"])
    render_page_header("Agent Leaderboard", "Home / Leaderboard", export_df=rows, export_name="leaderboard.csv")
    if rows.empty:
        st.info("No agents match the current filters.")
        return
    st.dataframe(
        rows[["position", "name", "agency_name", "dollar_index", "win_pct", "contracts_tracked", "total_contract_value"]],
        hide_index=True,
    )


def render_classifications_page():
    metric = st.selectbox("Select Classification Metric", CLASSIFICATION_METRICS, format_func=METRIC_LABELS.get)
    payload = compute_classifications(dataset, metric)
    render_page_header("Agent Classifications", "Home / Classifications")
    st.vega_lite_chart(payload["charts"]["tier_counts"], use_container_width=True)
    for tier in payload["tiers"]:
        with card(f"{tier['name']} ({len(tier['agents'])})"):
            if tier["agents"]:
                st.dataframe(pd.DataFrame(tier["agents"])[["name", "agency_name", "display_value"]], hide_index=True)


def render_comparison_page():
    with st.expander("Search and filters", expanded=True):
        search = st.text_input("Search agents or agencies", "")
        min_ct = st.number_input("Minimum contracts tracked", min_value=0, value=0, step=1)
        min_tcv = st.number_input("Minimum contract value ($M)", min_value=0.0, value=0.0, step=5.0)
        agency = st.selectbox("Agency", [""] + sorted({a.agency_name for a in dataset.agents if a.agency_name}))
        sort_by = st.selectbox("Sort by", SORT_OPTIONS)
    selected = st.multiselect("Compare agents (up to 3)", sorted(a.name for a in dataset.agents), max_selections=3)
    filters = normalize_comparison_filters(
        {
            "search": search,
            "min_contracts": min_ct or None,
            "min_contract_value_millions": min_tcv or None,
            "agency": agency,
            "sort_by": sort_by,
            "selected_agents": selected,
        }
    )
    payload = compute_comparison(filters, dataset)
    render_page_header("Agent Comparison", "Home / Comparison")
    with card(f"Available Agents ({payload['result_count']} agents)"):
        results = pd.DataFrame(payload["results"])
        if not results.empty:
            st.dataframe(results[["name", "agency_name", "dollar_index", "contracts_tracked"]], hide_index=True)
    with card("Comparison"):
        st.vega_lite_chart(payload["charts"]["radar"], use_container_width=True)
        cols = st.columns(2)
        with cols[0]:
            st.vega_lite_chart(payload["charts"]["dollar_index"], use_container_width=True)
        with cols[1]:
            st.vega_lite_chart(payload["charts"]["total_contract_value"], use_container_width=True)


def render_debug_page():
    payload = compute_debug(dataset, agencies)
    render_page_header("Data Quality", "Home / Data Quality")
    with card("Row counts"):
        st.write(payload["row_counts"])
        st.write(payload["cleaning_checks"])
    with card("Agencies without values"):
        st.write(payload["unpopulated_agencies"] or "None")
    with card("Duplicate agent names"):
        st.write(payload["duplicate_agent_names"] or "None")


if current_page == "Overview":
    render_overview_page()
elif current_page == "Agent Dashboard":
    render_agent_page()
elif current_page == "Agency Dashboard":
    render_agency_page()
elif current_page == "Leaderboard":
    render_leaderboard_page()
elif current_page == "Classifications":
    render_classifications_page()
elif current_page == "Agent Comparison":
    render_comparison_page()
else:
    render_debug_page()
