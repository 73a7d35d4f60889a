"""
Chart builders for the dashboard, goals and nutrition planner.

All charts share one quiet, minimal theme (apply_modern_theme) and take plain
dicts/lists as returned by the backend, so pages never build DataFrames.
"""

from typing import Any, Dict, List, Optional

import altair as alt
import pandas as pd

from recipehub.progress import macro_calories

# Muted palette; macros keep the same color on every chart
COLORS = {
    "protein": "#3b82f6",
    "carbs": "#f59e0b",
    "fat": "#ef4444",
    "calories": "#E8672F",
    "target": "#64748b",
    "weight": "#22c55e",
    "text": "#1e293b",
    "background": "#ffffff",
    "grid": "#f1f5f9",
}

MACRO_ORDER = ["protein", "carbs", "fat"]


def apply_modern_theme(chart: alt.Chart) -> alt.Chart:
    """
    Apply the shared theme to an Altair chart.

    Args:
        chart: Altair chart (or layer) to theme

    Returns:
        Themed chart
    """
    return chart.configure_view(
        strokeWidth=0,
        fill=COLORS["background"],
    ).configure_axis(
        grid=True,
        gridColor=COLORS["grid"],
        gridOpacity=0.3,
        domain=False,
        labelColor=COLORS["text"],
        labelFontSize=11,
        titleColor=COLORS["text"],
        titleFontSize=12,
        titleFontWeight="normal",
        ticks=False,
    ).configure_legend(
        titleFontSize=11,
        labelFontSize=10,
        labelColor=COLORS["text"],
        titleColor=COLORS["text"],
        padding=8,
    ).configure(
        padding={"left": 10, "top": 10, "right": 10, "bottom": 10},
        background=COLORS["background"],
    )


def build_macro_donut(protein: float, carbs: float, fat: float) -> Optional[alt.Chart]:
    """
    Donut of calories per macro (protein/carbs 4 kcal/g, fat 9 kcal/g).

    Returns:
        Chart, or None when all macros are zero
    """
    kcal = macro_calories(protein, carbs, fat)
    if not any(kcal.values()):
        return None

    grams = {"protein": protein, "carbs": carbs, "fat": fat}
    data = pd.DataFrame({
        "macro": MACRO_ORDER,
        "kcal": [kcal[m] for m in MACRO_ORDER],
        "grams": [grams[m] for m in MACRO_ORDER],
    })

    chart = alt.Chart(data).mark_arc(innerRadius=60, strokeWidth=0).encode(
        theta=alt.Theta("kcal:Q"),
        color=alt.Color(
            "macro:N",
            scale=alt.Scale(domain=MACRO_ORDER, range=[COLORS[m] for m in MACRO_ORDER]),
            legend=alt.Legend(title=None, orient="bottom"),
        ),
        tooltip=[
            alt.Tooltip("macro:N", title="Macro"),
            alt.Tooltip("grams:Q", title="Grams", format=".0f"),
            alt.Tooltip("kcal:Q", title="kcal", format=".0f"),
        ],
    ).properties(height=260)
    return apply_modern_theme(chart)


def build_calorie_trend(daily_logs: List[Dict[str, Any]], target: float) -> Optional[alt.Chart]:
    """Bars of consumed calories per day with the daily target as a rule."""
    if not daily_logs:
        return None

    data = pd.DataFrame([
        {"date": log["date"], "calories": log.get("total_calories") or 0}
        for log in daily_logs
    ])

    bars = alt.Chart(data).mark_bar(cornerRadiusTopLeft=4, cornerRadiusTopRight=4, color=COLORS["calories"]).encode(
        x=alt.X("date:N", title=None, sort=None),
        y=alt.Y("calories:Q", title="kcal"),
        tooltip=[alt.Tooltip("date:N", title="Date"), alt.Tooltip("calories:Q", title="kcal", format=".0f")],
    )
    rule = alt.Chart(pd.DataFrame({"target": [target]})).mark_rule(
        color=COLORS["target"], strokeDash=[4, 4]
    ).encode(y="target:Q")

    return apply_modern_theme(alt.layer(bars, rule).properties(height=260))


def build_weight_trend(weight_logs: List[Dict[str, Any]]) -> Optional[alt.Chart]:
    """Line of body weight over time (oldest first)."""
    if not weight_logs:
        return None

    data = pd.DataFrame([
        {"date": log["date"], "weight": log["weight_kg"]} for log in weight_logs
    ]).sort_values("date")

    chart = alt.Chart(data).mark_line(point=True, color=COLORS["weight"]).encode(
        x=alt.X("date:N", title=None, sort=None),
        y=alt.Y("weight:Q", title="kg", scale=alt.Scale(zero=False)),
        tooltip=[alt.Tooltip("date:N", title="Date"), alt.Tooltip("weight:Q", title="kg", format=".1f")],
    ).properties(height=240)
    return apply_modern_theme(chart)


def build_items_macro_bars(items: List[Dict[str, Any]]) -> Optional[alt.Chart]:
    """Stacked bars of macro grams per tracked item (nutrition planner)."""
    if not items:
        return None

    rows = []
    for item in items:
        for macro in MACRO_ORDER:
            rows.append({"item": item["name"], "macro": macro, "grams": item.get(macro) or 0})
    data = pd.DataFrame(rows)

    chart = alt.Chart(data).mark_bar().encode(
        y=alt.Y("item:N", title=None, sort=None),
        x=alt.X("grams:Q", title="grams", stack="zero"),
        color=alt.Color(
            "macro:N",
            scale=alt.Scale(domain=MACRO_ORDER, range=[COLORS[m] for m in MACRO_ORDER]),
            legend=alt.Legend(title=None, orient="bottom"),
        ),
        tooltip=["item:N", "macro:N", alt.Tooltip("grams:Q", format=".1f")],
    ).properties(height=max(120, 36 * len(items)))
    return apply_modern_theme(chart)
