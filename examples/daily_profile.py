"""
Generate presentation plots for one simulated day.

Produces separate figures:
  1. irradiance.png        — Solar irradiance profile
  2. panel.png             — Panel temperature, efficiency and heat output
  3. tank.png              — Tank temperature against ambient, with heat flows
  4. insulation_sweep.png  — Tank temperature for several insulation U-values

Run from project root:
    python examples/daily_profile.py
"""

import os

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from solar_tank.params import SimulationParams
from solar_tank.series import series_by_id
from solar_tank.simulation import (
    simulate_solar_irradiance, simulate_solar_panel, simulate_storage_tank, daily_summary,
)

# ── Style ──────────────────────────────────────────────────────────────────────
plt.rcParams.update({
    'figure.dpi': 150,
    'savefig.dpi': 150,
    'font.size': 11,
    'axes.titlesize': 13,
    'axes.labelsize': 11,
    'legend.fontsize': 9,
    'figure.facecolor': 'white',
    'axes.facecolor': '#fafafa',
    'axes.grid': True,
    'grid.alpha': 0.3,
})

RESULTS_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'results')


def hour_axis(ax):
    ax.set_xlim(0, 24)
    ax.set_xticks(range(0, 25, 3))
    ax.set_xlabel('Time of day (hours)')


def plot_irradiance(params):
    """Plot 1: irradiance profile."""
    (irr,) = simulate_solar_irradiance(params)

    fig, ax = plt.subplots(figsize=(10, 4))
    ax.fill_between(irr.x, irr.y, color='#f1c40f', alpha=0.25)
    ax.plot(irr.x, irr.y, color='#f39c12', linewidth=2, label=irr.id)
    ax.set_ylabel('Irradiance (W/m²)')
    ax.set_title('Solar Irradiance')
    hour_axis(ax)
    ax.legend(loc='upper right')
    fig.tight_layout()
    fig.savefig(os.path.join(RESULTS_DIR, 'irradiance.png'))
    plt.close(fig)


def plot_panel(params):
    """Plot 2: panel temperature (top), heat output and efficiency (bottom)."""
    s = series_by_id(simulate_solar_panel(params))

    fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(10, 7), sharex=True)
    panel_t = s['Panel Temperature (°C)']
    ambient = s['Ambient Temperature (°C)']
    ax1.plot(panel_t.x, panel_t.y, color='#d62728', linewidth=2, label=panel_t.id)
    ax1.plot(ambient.x, ambient.y, color='#1f77b4', linestyle='--', linewidth=1.5, label=ambient.id)
    ax1.set_ylabel('Temperature (°C)')
    ax1.set_title('Solar Panel at Equilibrium')
    ax1.legend(loc='upper left')

    out = s['Heat Output (W)']
    eff = s['Panel Efficiency (%)']
    ax2.plot(out.x, out.y, color='#2ca02c', linewidth=2, label=out.id)
    ax2.set_ylabel('Heat output (W)')
    ax2b = ax2.twinx()
    ax2b.plot(eff.x, eff.y, color='#9467bd', linestyle=':', linewidth=1.5, label=eff.id)
    ax2b.set_ylabel('Efficiency (%)')
    ax2b.grid(False)
    hour_axis(ax2)

    fig.tight_layout()
    fig.savefig(os.path.join(RESULTS_DIR, 'panel.png'))
    plt.close(fig)


def plot_tank(params):
    """Plot 3: tank temperature against ambient, heat flows below."""
    s = series_by_id(simulate_storage_tank(params))

    fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(10, 7), sharex=True,
                                   gridspec_kw={'height_ratios': [3, 2]})
    tank_t = s['Tank Temperature (°C)']
    ambient = s['Ambient Temperature (°C)']
    ax1.plot(tank_t.x, tank_t.y, color='#d62728', linewidth=2.5, marker='o', markersize=3,
             label=tank_t.id)
    ax1.plot(ambient.x, ambient.y, color='#1f77b4', linestyle='--', linewidth=1.5, label=ambient.id)
    ax1.set_ylabel('Temperature (°C)')
    ax1.set_title('Storage Tank')
    ax1.legend(loc='upper left')

    for key, color in (('Heat In (W)', '#2ca02c'), ('Heat Loss (W)', '#c0392b')):
        ax2.plot(s[key].x, s[key].y, color=color, linewidth=1.8, label=key)
    ax2.set_ylabel('Power (W)')
    ax2.legend(loc='upper right')
    hour_axis(ax2)

    fig.tight_layout()
    fig.savefig(os.path.join(RESULTS_DIR, 'tank.png'))
    plt.close(fig)


def plot_insulation_sweep(params):
    """Plot 4: effect of tank insulation on the daily temperature curve."""
    fig, ax = plt.subplots(figsize=(10, 4.5))
    for u_value, color in zip((0.25, 0.5, 1.0, 2.0, 4.0),
                              ('#08306b', '#2171b5', '#6baed6', '#fd8d3c', '#d94801')):
        s = series_by_id(simulate_storage_tank(params.replace(tank_insulation_u_value=u_value)))
        tank_t = s['Tank Temperature (°C)']
        ax.plot(tank_t.x, tank_t.y, color=color, linewidth=2, label=f'U = {u_value} W/m²·K')
    ax.axhline(y=params.ambient_temp, color='gray', linestyle='--', linewidth=1, label='Ambient')
    ax.set_ylabel('Tank temperature (°C)')
    ax.set_title('Tank Temperature vs Insulation')
    hour_axis(ax)
    ax.legend(loc='upper left')
    fig.tight_layout()
    fig.savefig(os.path.join(RESULTS_DIR, 'insulation_sweep.png'))
    plt.close(fig)


def main():
    os.makedirs(RESULTS_DIR, exist_ok=True)
    params = SimulationParams()

    print("Running daily simulation with default parameters...")
    plot_irradiance(params)
    plot_panel(params)
    plot_tank(params)
    plot_insulation_sweep(params)

    summary = daily_summary(params)
    print()
    print("=" * 50)
    print("DAILY SUMMARY")
    print("=" * 50)
    print(f"  Peak irradiance:     {summary['peak_irradiance']:8.1f} W/m²")
    print(f"  Peak panel temp:     {summary['peak_panel_temp']:8.1f} °C")
    print(f"  Heat collected:      {summary['energy_in_kwh']:8.2f} kWh")
    print(f"  Tank heat loss:      {summary['energy_lost_kwh']:8.2f} kWh")
    print(f"  Max tank temp:       {summary['max_tank_temp']:8.1f} °C")
    print(f"  End-of-day tank:     {summary['final_tank_temp']:8.1f} °C "
          f"({summary['tank_temp_rise']:+.1f} °C)")
    print(f'\nAll plots saved to {RESULTS_DIR}/')


if __name__ == '__main__':
    main()
