"""Portfolio Frontier Streamlit UI."""

from __future__ import annotations

import streamlit as st

from portfolio_frontier.commentary import CommentaryClient
from portfolio_frontier.errors import CsvValidationError
from portfolio_frontier.portfolio.session import PortfolioSession
from portfolio_frontier.viz.frontier import make_frontier_figure
from portfolio_frontier.viz.heatmap import make_correlation_heatmap
from portfolio_frontier.viz.performance import make_cumulative_returns_figure
try:
    from ui.state import UIState
    from ui.utils import allocation_table, fmt_num, fmt_pct, sync_upload
except ModuleNotFoundError:
    # Supports direct execution via: streamlit run ui/streamlit_app.py
    from state import UIState  # type: ignore
    from utils import allocation_table, fmt_num, fmt_pct, sync_upload  # type: ignore

STATE_KEY = "frontier_ui_state"


def get_state() -> UIState:
    if STATE_KEY not in st.session_state:
        st.session_state[STATE_KEY] = UIState()
    return st.session_state[STATE_KEY]


def _theme_to_template(theme: str) -> str:
    return "plotly_dark" if theme == "Dark" else "plotly_white"


def _weight_key(asset_id: str) -> str:
    return f"w_{asset_id}"


def _sync_weight_widgets(session: PortfolioSession) -> None:
    for asset in session.assets:
        st.session_state[_weight_key(asset.id)] = session.weight_of(asset.id)


def _on_weight_change(session: PortfolioSession, asset_id: str) -> None:
    session.set_weight(asset_id, float(st.session_state[_weight_key(asset_id)]))
    _sync_weight_widgets(session)


def _on_bulk_weights(session: PortfolioSession, action: str) -> None:
    if action == "reset":
        session.reset_weights()
    else:
        session.randomize_weights()
    _sync_weight_widgets(session)


def _on_asset_change(
    state: UIState,
    session: PortfolioSession,
    remove_id: str | None = None,
) -> None:
    if remove_id is None:
        session.add_asset()
    else:
        state.remove_asset(remove_id)
    _sync_weight_widgets(session)


def _on_rename(state: UIState, session: PortfolioSession, asset_id: str) -> None:
    try:
        session.rename_asset(asset_id, str(st.session_state[f"name_{asset_id}"]))
        state.last_error = None
    except ValueError as exc:
        state.last_error = str(exc)


def _render_sidebar(state: UIState, session: PortfolioSession) -> str:
    st.sidebar.title("Portfolio Frontier")
    theme = st.sidebar.radio("Theme", options=["Dark", "Light"], index=0)

    st.sidebar.subheader("Data")
    st.sidebar.button(
        "Refresh data",
        help="Regenerate mock series with the next seed.",
        on_click=session.refresh_data,
    )
    st.sidebar.caption(f"Mock seed: {session.seed}")

    st.sidebar.subheader("Weights")
    st.sidebar.button("Equal weights", on_click=_on_bulk_weights, args=(session, "reset"))
    st.sidebar.button("Randomize", on_click=_on_bulk_weights, args=(session, "randomize"))

    st.sidebar.subheader("Instruments")
    st.sidebar.button("Add instrument", on_click=_on_asset_change, args=(state, session))
    return theme


def _render_kpis(session: PortfolioSession) -> None:
    snap = session.snapshot
    rf = snap.risk_free_rate_annual
    col_ret, col_vol, col_sharpe = st.columns(3)
    col_ret.metric("Expected return (ann.)", fmt_pct(snap.metrics.expected_return))
    col_ret.caption(f"Rf = {fmt_pct(rf)} • mean monthly return × 12")
    col_vol.metric("Volatility (ann.)", fmt_pct(snap.metrics.volatility))
    col_vol.caption("σ = sqrt(wᵀ Σ w), Σ annual = Σ monthly × 12")
    col_sharpe.metric("Sharpe (ann.)", fmt_num(snap.metrics.sharpe, 2))
    col_sharpe.caption("(Return − Rf) / Volatility")


def _render_allocation(state: UIState, session: PortfolioSession) -> None:
    st.subheader("Portfolio composition")
    st.caption("Long-only • weights are renormalized to 100% after every edit.")

    for i, asset in enumerate(session.assets):
        cols = st.columns([3, 4, 3, 1])
        name_key = f"name_{asset.id}"
        if name_key not in st.session_state:
            st.session_state[name_key] = asset.name
        cols[0].text_input(
            "Name",
            key=name_key,
            label_visibility="collapsed",
            on_change=_on_rename,
            args=(state, session, asset.id),
        )
        snap = session.snapshot
        cols[0].caption(
            f"μ: {fmt_pct(snap.asset_returns_annual[i])} • "
            f"σ: {fmt_pct(snap.asset_volatilities_annual[i])}"
        )
        key = _weight_key(asset.id)
        if key not in st.session_state:
            st.session_state[key] = session.weight_of(asset.id)
        cols[1].slider(
            "Weight",
            min_value=0.0,
            max_value=1.0,
            step=0.005,
            key=key,
            label_visibility="collapsed",
            on_change=_on_weight_change,
            args=(session, asset.id),
        )

        upload = cols[2].file_uploader(
            "OHLCV CSV",
            type=["csv"],
            key=f"csv_{asset.id}",
            label_visibility="collapsed",
        )
        try:
            if sync_upload(
                session,
                asset.id,
                upload.name if upload is not None else None,
                upload.getvalue() if upload is not None else None,
            ):
                state.last_error = None
        except CsvValidationError as exc:
            state.last_error = f"{asset.ticker}: {exc}"

        cols[3].button(
            "✕",
            key=f"rm_{asset.id}",
            help="Remove instrument",
            on_click=_on_asset_change,
            args=(state, session, asset.id),
        )

    if state.last_error:
        st.error(state.last_error)
    st.dataframe(allocation_table(session.snapshot), use_container_width=True, hide_index=True)


def _render_frontier(session: PortfolioSession, template: str) -> None:
    st.subheader("Efficient Frontier")
    if st.button("Generate frontier"):
        session.generate_frontier()

    result = session.frontier
    if result is None:
        st.info("Statistics changed or no frontier yet. Click 'Generate frontier'.")
        return
    if result.cloud.empty:
        st.warning("No portfolios sampled.")
        return
    fig = make_frontier_figure(result, current=session.current_point(), theme=template)
    st.plotly_chart(fig, use_container_width=True)
    if result.best_sharpe is not None:
        best = result.best_sharpe
        st.caption(
            f"Best Sharpe {fmt_num(best.sharpe, 2)} at "
            f"{fmt_pct(best.risk)} volatility / {fmt_pct(best.ret)} return"
        )


def _render_commentary(state: UIState, session: PortfolioSession) -> None:
    st.subheader("AI Commentary")
    status_label = {"idle": "Ready" if state.commentary_text else "Not generated", "loading": "…", "error": "Error"}
    st.caption(status_label[state.commentary_status])

    disabled = not session.frontier_generated
    if st.button("Generate commentary", disabled=disabled):
        state.commentary_status = "loading"
        with st.spinner("Generating commentary…"):
            client = CommentaryClient.from_config(state.config.commentary)
            result = client.request(session.commentary_facts())
        state.commentary_status = "error" if result.status == "error" else "idle"
        state.commentary_text = result.text
    if disabled:
        st.caption("Tip: generate the frontier first.")

    if state.commentary_status == "error":
        st.error(state.commentary_text)
    else:
        st.markdown(state.commentary_text or "Click 'Generate commentary' for an interpretation.")


def main() -> None:
    st.set_page_config(page_title="Portfolio Frontier", layout="wide")
    state = get_state()
    session = state.portfolio()

    theme = _render_sidebar(state, session)
    template = _theme_to_template(theme)

    st.title("Portfolio Optimizer")
    st.caption(
        "Live annualized metrics, correlation matrix and Monte-Carlo efficient frontier "
        "from monthly returns."
    )

    _render_kpis(session)
    left, right = st.columns([2, 3])
    with left:
        _render_allocation(state, session)
    with right:
        snap = session.snapshot
        if snap.assets:
            st.plotly_chart(
                make_correlation_heatmap(snap.corr, snap.tickers, theme=template),
                use_container_width=True,
            )
            st.plotly_chart(
                make_cumulative_returns_figure(snap.cumulative_returns(tail=60), theme=template),
                use_container_width=True,
            )
            st.caption("Cumulative returns of the aligned monthly series, last 60 months.")
    _render_frontier(session, template)
    _render_commentary(state, session)


if __name__ == "__main__":
    main()
