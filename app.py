"""
Solar Water Heater — Interactive Streamlit Demo

Run with:
    streamlit run app.py
"""

import numpy as np
import streamlit as st
import plotly.graph_objects as go
from plotly.subplots import make_subplots
from typing import Any, Dict, List

from solar_tank.params import SimulationParams, ConfigurationError, SECTIONS, PARAMETER_INFO
from solar_tank.series import Series, series_by_id
from solar_tank.simulation import run_all, daily_summary


# ─────────────────────────────────────────────────────────────────────────────
# PAGE CONFIG
# ─────────────────────────────────────────────────────────────────────────────
st.set_page_config(
    page_title="Solar Water Heater",
    page_icon="☀️",
    layout="wide",
    initial_sidebar_state="expanded",
)

TEMPLATE = "plotly_white"


# ─────────────────────────────────────────────────────────────────────────────
# SLIDER RANGES  (min, max, step) per parameter
# ─────────────────────────────────────────────────────────────────────────────
RANGES = {
    "ambient_temp":            (-20.0,   45.0,  0.5),
    "mass_flow_rate":          (0.0,     0.5,   0.01),
    "irradiance_start_hour":   (0.0,     12.0,  0.5),
    "irradiance_end_hour":     (12.0,    24.0,  0.5),
    "irradiance_peak_hour":    (0.0,     24.0,  0.5),
    "solar_irradiance_peak":   (0.0,     1200.0, 10.0),
    "panel_area":              (0.5,     20.0,  0.5),
    "panel_efficiency_ref":    (0.1,     0.95,  0.01),
    "panel_max_temp":          (30.0,    150.0, 1.0),
    "panel_u_value":           (1.0,     30.0,  0.5),
    "panel_ref_temp":          (0.0,     50.0,  0.5),
    "panel_temp_coefficient":  (0.0,     0.02,  0.001),
    "tank_volume":             (50.0,    1000.0, 10.0),
    "initial_tank_temp":       (0.0,     80.0,  0.5),
    "tank_surface_area":       (0.5,     10.0,  0.1),
    "tank_insulation_u_value": (0.05,    5.0,   0.05),
}

ICONS = {
    "simulationParameters": "⏱️",
    "solarIrradiance":      "☀️",
    "solarPanel":           "🔆",
    "storageTank":          "🌡️",
}


# ─────────────────────────────────────────────────────────────────────────────
# SIMULATION (cached)
# ─────────────────────────────────────────────────────────────────────────────
@st.cache_data(show_spinner="Running simulation…")
def run_simulation(cfg_items: tuple) -> Dict[str, Any]:
    """
    Run all three drivers and the daily summary for one parameter set.
    Arguments passed as a sorted tuple of (key, value) pairs so that
    st.cache_data can hash them reliably. Each new parameter set simply
    replaces the previous result on screen.
    """
    cfg = dict(cfg_items)
    return {"series": run_all(cfg), "summary": daily_summary(cfg)}


def plot_series(series: List[Series], title: str, y_title: str, height: int = 380) -> go.Figure:
    """One Plotly line per series; the dashed hint becomes a dashed line."""
    fig = go.Figure()
    for s in series:
        fig.add_trace(go.Scatter(
            x=s.x, y=s.y, name=s.id,
            line=dict(color=s.color, width=2, dash="dash" if s.dashed else "solid"),
            hovertemplate=f"{s.id}: %{{y:.2f}}<extra></extra>",
        ))
    fig.update_layout(
        template=TEMPLATE, height=height,
        title=title,
        xaxis_title="Time of Day (hours)",
        yaxis_title=y_title,
        hovermode="x unified",
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
    )
    fig.update_xaxes(range=[0, 24], dtick=2)
    return fig


# ─────────────────────────────────────────────────────────────────────────────
# SIDEBAR
# ─────────────────────────────────────────────────────────────────────────────
defaults = SimulationParams()

with st.sidebar:
    st.title("⚙️ Configuration")

    cfg = {}
    for section_id, section in SECTIONS.items():
        expanded = section_id in ("solarIrradiance", "storageTank")
        with st.expander(f"{ICONS[section_id]} {section['title']}", expanded=expanded):
            for name in section["parameters"]:
                lo, hi, step = RANGES[name]
                info = PARAMETER_INFO[name]
                cfg[name] = st.slider(
                    info["label"], float(lo), float(hi),
                    float(getattr(defaults, name)), float(step),
                    help=info["description"], key=name,
                )


# ─────────────────────────────────────────────────────────────────────────────
# MAIN — HEADER
# ─────────────────────────────────────────────────────────────────────────────
st.title("☀️ Solar Water Heater — Daily Simulation")

try:
    run = run_simulation(tuple(sorted(cfg.items())))
except ConfigurationError as exc:
    st.error(f"Invalid configuration: {exc}")
    st.stop()

results = run["series"]
summary = run["summary"]

m1, m2, m3, m4 = st.columns(4)
m1.metric("Heat Collected",  f"{summary['energy_in_kwh']:.2f} kWh")
m2.metric("Tank Heat Loss",  f"{summary['energy_lost_kwh']:.2f} kWh")
m3.metric("Peak Tank Temp",  f"{summary['max_tank_temp']:.1f} °C",
          delta=f"{summary['max_tank_temp'] - cfg['initial_tank_temp']:+.1f} °C")
m4.metric("Peak Panel Temp", f"{summary['peak_panel_temp']:.1f} °C")

st.markdown("---")


# ─────────────────────────────────────────────────────────────────────────────
# TABS
# ─────────────────────────────────────────────────────────────────────────────
tab_irr, tab_panel, tab_tank = st.tabs([
    "☀️ Solar Irradiance",
    "🔆 Solar Panel",
    "🌡️ Storage Tank",
])


# ══════════════════════════════════════════════════════════════════════════════
# TAB 1 — IRRADIANCE
# ══════════════════════════════════════════════════════════════════════════════
with tab_irr:
    irr = results["solarIrradiance"][0]
    fig = go.Figure(go.Scatter(
        x=irr.x, y=irr.y, name=irr.id,
        fill="tozeroy", fillcolor="rgba(255,190,0,0.18)",
        line=dict(color=irr.color, width=2),
        hovertemplate="Irradiance: %{y:.0f} W/m²<extra></extra>",
    ))
    fig.add_vline(x=cfg["irradiance_peak_hour"], line_dash="dot", line_color="gray",
                  annotation_text="Peak", annotation_position="top")
    fig.update_layout(
        template=TEMPLATE, height=420,
        title="Solar Irradiance Profile",
        xaxis_title="Time of Day (hours)",
        yaxis_title="Irradiance (W/m²)",
    )
    fig.update_xaxes(range=[0, 24], dtick=2)
    st.plotly_chart(fig, use_container_width=True)

    st.caption(
        "Cosine profile across the daylight window, zero before sunrise and "
        "after sunset. The peak hour sets where the cosine is centred."
    )


# ══════════════════════════════════════════════════════════════════════════════
# TAB 2 — SOLAR PANEL
# ══════════════════════════════════════════════════════════════════════════════
with tab_panel:
    panel = series_by_id(results["solarPanel"])

    fig_p = make_subplots(
        rows=2, cols=1,
        shared_xaxes=True,
        row_heights=[0.55, 0.45],
        vertical_spacing=0.06,
        specs=[[{"secondary_y": False}], [{"secondary_y": True}]],
    )
    for key in ("Panel Temperature (°C)", "Ambient Temperature (°C)"):
        s = panel[key]
        fig_p.add_trace(go.Scatter(
            x=s.x, y=s.y, name=s.id,
            line=dict(color=s.color, width=2, dash="dash" if s.dashed else "solid"),
        ), row=1, col=1)

    out = panel["Heat Output (W)"]
    eff = panel["Panel Efficiency (%)"]
    fig_p.add_trace(go.Scatter(
        x=out.x, y=out.y, name=out.id,
        fill="tozeroy", fillcolor="rgba(52,152,219,0.15)",
        line=dict(color=out.color, width=2),
    ), row=2, col=1, secondary_y=False)
    fig_p.add_trace(go.Scatter(
        x=eff.x, y=eff.y, name=eff.id,
        line=dict(color=eff.color, width=1.5, dash="dot"),
    ), row=2, col=1, secondary_y=True)

    fig_p.update_yaxes(title_text="Temperature (°C)", row=1, col=1)
    fig_p.update_yaxes(title_text="Heat Output (W)", row=2, col=1, secondary_y=False)
    fig_p.update_yaxes(title_text="Efficiency (%)", row=2, col=1, secondary_y=True)
    fig_p.update_xaxes(title_text="Time of Day (hours)", range=[0, 24], dtick=2, row=2, col=1)
    fig_p.update_layout(
        template=TEMPLATE, height=600,
        title="Panel Equilibrium Performance",
        hovermode="x unified",
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
    )
    st.plotly_chart(fig_p, use_container_width=True)

    st.caption(
        f"Panel temperature display is capped at {cfg['panel_max_temp']:.0f} °C. "
        "Efficiency drops linearly above the reference temperature and never "
        "falls below 10%."
    )


# ══════════════════════════════════════════════════════════════════════════════
# TAB 3 — STORAGE TANK
# ══════════════════════════════════════════════════════════════════════════════
with tab_tank:
    tank = series_by_id(results["storageTank"])

    col_l, col_r = st.columns([2, 1])

    with col_l:
        st.plotly_chart(
            plot_series([tank["Tank Temperature (°C)"], tank["Ambient Temperature (°C)"]],
                        "Tank Temperature", "Temperature (°C)"),
            use_container_width=True,
        )
        st.plotly_chart(
            plot_series([tank["Heat In (W)"], tank["Heat Loss (W)"]],
                        "Heat Flows", "Power (W)", height=320),
            use_container_width=True,
        )

    with col_r:
        heat_in = tank["Heat In (W)"].y
        heat_loss = tank["Heat Loss (W)"].y
        if heat_in.sum() > 0:
            fig_pie = go.Figure(go.Pie(
                labels=["Retained", "Lost"],
                values=[max(summary["energy_in_kwh"] - summary["energy_lost_kwh"], 0.0),
                        summary["energy_lost_kwh"]],
                marker_colors=["#2ecc71", "#c0392b"],
                hole=0.45,
                textinfo="label+percent",
            ))
            fig_pie.update_layout(
                template=TEMPLATE, height=260,
                title=f"Energy Split<br><sub>Total {summary['energy_in_kwh']:.2f} kWh in</sub>",
                showlegend=False,
                margin=dict(t=55, b=5, l=5, r=5),
            )
            st.plotly_chart(fig_pie, use_container_width=True)

        st.metric("Final Tank Temp", f"{summary['final_tank_temp']:.1f} °C",
                  delta=f"{summary['tank_temp_rise']:+.1f} °C")
        st.metric("Peak Sampled Heat In", f"{float(np.max(heat_in)):.0f} W")
        st.metric("Peak Sampled Heat Loss", f"{float(np.max(heat_loss)):.0f} W")
