"""
Wheel Monthly Analytics - Streamlit Application
Main entry point for the monthly income / collateral views
"""
import streamlit as st
import pandas as pd
from pathlib import Path

# Page config must be first Streamlit command
st.set_page_config(
    page_title="Wheel Analytics",
    page_icon="📊",
    layout="wide",
    initial_sidebar_state="expanded"
)

from config import EXCEL_PATH, configure_logging
from excel_handler import ExcelHandler
from month_keys import default_month_range, is_valid_month_key
from monthly_calculator import load_monthly_aggregate
from persistence import get_all_config, get_lookback_months, set_config_value
from symbol_calculator import SymbolMonthlyCalculator

configure_logging()


# ============================================================
# FORMATTING HELPERS - Negative Values in Red with Parentheses
# ============================================================
def format_currency(value, decimals=2):
    """
    Format currency value. Negative values shown as (-$xxx) in red.

    Returns:
        Formatted string with HTML styling for negative values
    """
    if value is None or pd.isna(value):
        return "$0.00"

    value = float(value)
    formatted = f"${abs(value):,.{decimals}f}"

    if value < 0:
        return f'<span style="color: #ff4444;">(-{formatted})</span>'
    return formatted


def format_percent(value, decimals=1):
    """Format percentage. Negative values shown as (-xx.x%) in red."""
    if value is None or pd.isna(value):
        return "0%"

    value = float(value)
    formatted = f"{abs(value):,.{decimals}f}%"

    if value < 0:
        return f'<span style="color: #ff4444;">(-{formatted})</span>'
    return formatted


def series_frame(month_amounts, labels, column):
    """MonthAmount list -> DataFrame indexed by month label"""
    return pd.DataFrame({column: [m.amount for m in month_amounts]}, index=labels)


# ============================================================
# DATA LOADING
# ============================================================
@st.cache_resource
def get_handler(excel_path: str = EXCEL_PATH):
    """Workbook handler, or None if the workbook is missing"""
    if not Path(excel_path).exists():
        return None
    return ExcelHandler(excel_path)


def refresh_data():
    """Force re-read of the workbook"""
    st.cache_resource.clear()
    st.rerun()


# ============================================================
# SIDEBAR
# ============================================================
def render_sidebar():
    """Render sidebar navigation"""
    st.sidebar.title("📊 Wheel Analytics")
    page = st.sidebar.radio(
        "Navigation",
        ["📅 Monthly", "🔎 Symbol", "⚙️ Config"],
        label_visibility="collapsed"
    )
    st.sidebar.caption(f"Workbook: `{Path(EXCEL_PATH).name}`")
    if st.sidebar.button("🔄 Refresh Data"):
        refresh_data()
    return page


# ============================================================
# MONTHLY PAGE
# ============================================================
def render_monthly(handler):
    """Income by month, by ticker and ticker x month with collateral and APR"""
    st.title("📅 Monthly Performance")

    default_from, default_to = default_month_range(months=get_lookback_months())
    col1, col2 = st.columns(2)
    with col1:
        from_month = st.text_input("From (YYYY-MM)", value=default_from).strip()
    with col2:
        to_month = st.text_input("To (YYYY-MM)", value=default_to).strip()

    for label, value in (("From", from_month), ("To", to_month)):
        if value and not is_valid_month_key(value):
            st.error(f"❌ {label} month must be YYYY-MM (got '{value}')")
            return

    data = load_monthly_aggregate(handler, from_month, to_month, get_lookback_months())

    if not data.months:
        st.info("ℹ️ No activity in the selected range.")
        return

    labels = data.month_labels

    # ===== HEADLINE METRICS =====
    c1, c2, c3, c4, c5 = st.columns(5)
    c1.metric("Puts", f"${data.puts.total:,.2f}")
    c2.metric("Calls", f"${data.calls.total:,.2f}")
    c3.metric("Cap Gains", f"${data.cap_gains.total:,.2f}")
    c4.metric("Dividends", f"${data.dividends.total:,.2f}")
    c5.metric("Grand Total", f"${data.grand_total:,.2f}")

    # ===== CATEGORY CHARTS =====
    st.subheader("💰 Income by Month")
    by_month = pd.concat(
        [
            series_frame(data.puts.by_month, labels, "Puts"),
            series_frame(data.calls.by_month, labels, "Calls"),
            series_frame(data.cap_gains.by_month, labels, "Cap Gains"),
            series_frame(data.dividends.by_month, labels, "Dividends"),
        ],
        axis=1
    )
    st.bar_chart(by_month)

    st.subheader("🏷️ Income by Ticker")
    tabs = st.tabs(["Puts", "Calls", "Cap Gains", "Dividends"])
    for tab, category in zip(tabs, (data.puts, data.calls, data.cap_gains, data.dividends)):
        with tab:
            if not category.by_ticker:
                st.caption("No activity")
                continue
            df_ticker = pd.DataFrame(
                {"Amount": [t.amount for t in category.by_ticker]},
                index=[t.ticker for t in category.by_ticker]
            )
            st.bar_chart(df_ticker)

    # ===== TICKER x MONTH TABLE =====
    st.subheader("📋 Ticker × Month")
    table = pd.DataFrame(
        [[row.month_values.get(ym, 0.0) for ym in data.months] + [row.total] for row in data.table_rows],
        index=[row.ticker for row in data.table_rows],
        columns=labels + ["Total"]
    )
    table.loc["Total"] = [data.table_totals_by_month.get(ym, 0.0) for ym in data.months] + [data.grand_total]
    st.dataframe(table.style.format("${:,.2f}"), use_container_width=True)

    # ===== COLLATERAL & APR =====
    st.subheader("🏦 Peak Collateral & APR")
    col_left, col_right = st.columns(2)
    with col_left:
        st.line_chart(series_frame(data.collateral_by_month, labels, "Peak Collateral"))
    with col_right:
        st.line_chart(series_frame(data.apr_by_month, labels, "APR %"))

    latest_apr = data.apr_by_month[-1].amount
    st.markdown(
        f"Latest month ({labels[-1]}): peak collateral "
        f"{format_currency(data.collateral_by_month[-1].amount)}, APR {format_percent(latest_apr)}",
        unsafe_allow_html=True
    )


# ============================================================
# SYMBOL PAGE
# ============================================================
def render_symbol(handler):
    """Seasonal option income for one ticker"""
    st.title("🔎 Symbol")

    symbols = handler.list_symbols()
    if not symbols:
        st.info("ℹ️ No symbols found in the workbook.")
        return

    symbol = st.selectbox("Ticker", symbols)
    options = handler.list_options()
    summary = SymbolMonthlyCalculator.build_symbol_summary(
        symbol, options, handler.list_dividends(), handler.list_long_positions()
    )

    # ===== LIFETIME TOTALS =====
    c1, c2, c3, c4, c5 = st.columns(5)
    c1.metric("Options Gains", f"${summary.options_gains:,.2f}")
    c2.metric("Cap Gains", f"${summary.cap_gains:,.2f}")
    c3.metric("Dividends", f"${summary.dividends_total:,.2f}")
    c4.metric("Total Profits", f"${summary.total_profits:,.2f}")
    c5.metric("Cash on Cash", f"{summary.cash_on_cash:,.1f}%",
              help=f"Total profits / ${summary.total_invested:,.2f} invested")

    # ===== MONTHLY BUCKETS =====
    results = SymbolMonthlyCalculator.build_symbol_monthly(options, symbol=symbol)

    df = pd.DataFrame([
        {
            "Month": r.month,
            "Puts": r.puts_count,
            "Calls": r.calls_count,
            "Puts Total": r.puts_total,
            "Calls Total": r.calls_total,
            "Total": r.total,
        }
        for r in results
    ]).set_index("Month")

    st.bar_chart(df[["Puts Total", "Calls Total"]])
    st.dataframe(
        df.style.format({"Puts Total": "${:,.2f}", "Calls Total": "${:,.2f}", "Total": "${:,.2f}"}),
        use_container_width=True
    )
    st.markdown(f"**Total:** {format_currency(df['Total'].sum())}", unsafe_allow_html=True)

    # ===== OPTIONS =====
    st.subheader("📜 Options")
    if not summary.options:
        st.caption("No options for this ticker")
        return
    df_options = pd.DataFrame([
        {
            "Type": o.option_type,
            "Opened": o.opened,
            "Expiration": o.expiration,
            "Closed": o.closed,
            "Strike": o.strike,
            "Contracts": o.contracts,
            "Premium": o.premium,
            "Profit": o.total_profit,
            "Status": "Open" if o.is_open else "Closed",
        }
        for o in summary.options
    ])
    st.dataframe(df_options, use_container_width=True, hide_index=True)


# ============================================================
# CONFIG PAGE
# ============================================================
def render_config():
    """Edit persisted config values"""
    st.title("⚙️ Config")

    for key, entry in get_all_config().items():
        with st.form(f"config_{key}"):
            value = st.text_input(key, value=entry['value'], help=entry['description'])
            if st.form_submit_button("Save"):
                set_config_value(key, value)
                st.success(f"✅ Saved {key} = {value}")


def main():
    """Main application entry point"""
    page = render_sidebar()

    if page == "⚙️ Config":
        render_config()
        return

    handler = get_handler()
    if handler is None:
        st.error(f"❌ Data file not found: `{EXCEL_PATH}`")
        st.info("💡 Set `WHEEL_DATA_FILE` in `.env` or create the workbook with "
                "`ExcelHandler.create_workbook(path)`.")
        return

    if page == "📅 Monthly":
        render_monthly(handler)
    elif page == "🔎 Symbol":
        render_symbol(handler)


if __name__ == "__main__":
    main()
