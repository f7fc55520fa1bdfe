"""
Streamlit web interface for the warrant valuation engine.

Interactive UI with tabs for:
- Scenario comparison (status quo plus spot shifts)
- Time value decay until expiry
"""

from datetime import date, timedelta

import numpy as np
import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from warrant_pricer.scenarios.builders import build_spot_scenarios, generate_valuation_curve
from warrant_pricer.scenarios.orchestrator import price_scenarios
from warrant_pricer.utils.constants import DEFAULT_SPOT_CHANGE_PCT, MAX_SCENARIOS
from warrant_pricer.utils.types import Instrument, MarketScenario

st.set_page_config(page_title="Warrant Calculator", layout="wide")

st.title("Warrant Calculator")
st.markdown("Scenario-based valuation of warrants with Greeks, break-even and price response")

# Sidebar parameters
st.sidebar.header("Instrument")
warrant_type = st.sidebar.selectbox("Type", ["call", "put"])
K = st.sidebar.number_input("Strike (K)", value=100.0, min_value=0.01)
expiry = st.sidebar.date_input("Expiry", value=date.today() + timedelta(days=180))
ratio = st.sidebar.number_input("Ratio", value=0.1, min_value=0.0001, format="%.4f")
currency = st.sidebar.text_input("Currency", value="EUR")

st.sidebar.header("Market")
valuation_date = st.sidebar.date_input("Valuation date", value=date.today())
S = st.sidebar.number_input("Underlying (S)", value=100.0, min_value=0.01)
r = st.sidebar.slider("Risk-Free Rate (%)", -2.0, 10.0, 3.0) / 100
q = st.sidebar.slider("Dividend Yield (%)", 0.0, 10.0, 0.0) / 100
sigma = st.sidebar.slider("Volatility (%)", 1.0, 200.0, 25.0) / 100
fx_rate = st.sidebar.number_input("FX rate", value=1.0, min_value=0.0001, format="%.4f")
reference_price = st.sidebar.number_input("Reference price", value=0.0, min_value=0.0)

instrument = Instrument(
    warrant_type=warrant_type,
    strike=K,
    expiry=expiry,
    ratio=ratio,
    currency=currency.strip().upper() or "EUR",
)
base = MarketScenario(
    underlying_price=S,
    rate=r,
    volatility=sigma,
    dividend_yield=q,
    fx_rate=fx_rate,
    valuation_date=valuation_date,
)

tab1, tab2 = st.tabs(["Scenario Comparison", "Time Value Decay"])

with tab1:
    st.header("Scenario Comparison")

    shift_count = st.slider("Spot shifts", 0, MAX_SCENARIOS - 1, 2)
    default_shifts = np.linspace(-10.0, 10.0, shift_count) if shift_count > 1 else [DEFAULT_SPOT_CHANGE_PCT]
    shifts = []
    columns = st.columns(max(shift_count, 1))
    for index in range(shift_count):
        with columns[index]:
            shifts.append(
                st.number_input(
                    f"Scenario {index + 1} (%)",
                    value=float(default_shifts[index]),
                    key=f"shift-{index}",
                )
            )

    scenarios = build_spot_scenarios(base, shifts)
    results = price_scenarios(
        instrument, scenarios, reference_price if reference_price > 0 else None
    )

    labels = ["Status Quo"] + [f"{shift:+.1f}%" for shift in shifts]
    table = pd.DataFrame(
        [result.to_dict() for result in results],
        index=labels,
    ).drop(columns=["currency", "valuationDate", "impliedVolatilityUsed"])
    table.insert(0, "underlying", [scenario.underlying_price for scenario in scenarios])
    st.dataframe(table.T, use_container_width=True)

    status_quo = results[0]
    if status_quo.is_priced:
        col1, col2, col3 = st.columns(3)
        col1.metric("Fair value", f"{status_quo.fair_value:.4f} {instrument.currency}")
        col2.metric("Break-even", f"{status_quo.break_even:.2f}")
        col3.metric("Omega", "-" if status_quo.omega is None else f"{status_quo.omega:.2f}")

with tab2:
    st.header("Time Value Decay")

    points = generate_valuation_curve(instrument, base)
    if points:
        fig = go.Figure()
        fig.add_trace(go.Scatter(
            x=[point.day for point in points],
            y=[point.time_value for point in points],
            name="Time value",
        ))
        fig.add_trace(go.Scatter(
            x=[point.day for point in points],
            y=[point.fair_value for point in points],
            name="Fair value",
            line=dict(color="orange"),
        ))
        fig.update_layout(
            title="Value until expiry (spot held constant)",
            xaxis_title="Days from valuation date",
            yaxis_title=f"Value ({instrument.currency})",
        )
        st.plotly_chart(fig, use_container_width=True)
    else:
        st.info("Enter all market inputs to draw the decay curve.")
