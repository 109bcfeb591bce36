import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import asyncio
from datetime import date

import pandas as pd
import plotly.express as px
import streamlit as st

from salon.aggregator import parse_month
from salon.config import Settings
from salon.domain import APPOINTMENT, CLIENT, EXPENSE, SERVICE
from salon.formatting import format_currency, format_date_simple
from salon.loader import load_dashboard, refresh_all
from salon.logging_setup import configure_logging, get_logger
from salon.resolver import DisplayNameCache, suggest_price
from salon.services import SalonService
from salon.store import RecordStore
from salon.transforms import appointment_row, clients, expense_row, services
from salon.transport import ApiClient

st.set_page_config(page_title="Salon CRM", layout="wide")

KIND_LABELS = {
    CLIENT: "clients",
    SERVICE: "services",
    APPOINTMENT: "appointments",
    EXPENSE: "expenses",
}
PAYMENT_METHODS = ["Pix", "Cash", "Debit card", "Credit card"]


def _secret(name: str):
    try:
        return st.secrets.get(name)
    except FileNotFoundError:
        # no secrets.toml
        return None


settings = Settings.from_env().override(
    api_url=_secret("SALON_API_URL"),
    timeout=_secret("SALON_TIMEOUT"),
    currency=_secret("SALON_CURRENCY"),
    locale=_secret("SALON_LOCALE"),
    log_level=_secret("SALON_LOG_LEVEL"),
)
configure_logging(settings.log_level)
logger = get_logger("salon.app")

if not settings.api_url:
    st.error("SALON_API_URL is not configured (environment or .streamlit/secrets.toml).")
    st.stop()


def money(value) -> str:
    return format_currency(value, settings.currency, settings.locale)


def displayable(row: dict) -> dict:
    return {**row, "date": format_date_simple(row["date"]), "amount": money(row["amount"])}


def show_load_errors(errors: dict) -> None:
    failed = [KIND_LABELS[k] for k, err in errors.items() if err]
    if failed:
        st.warning("Could not load: " + ", ".join(failed) + ". Showing what was loaded.")


# one store per browser session
if "store" not in st.session_state:
    st.session_state.store = RecordStore()
    st.session_state.names = DisplayNameCache(st.session_state.store)
    st.session_state.api = ApiClient(settings.api_url, timeout=settings.timeout)
    st.session_state.month = date.today().strftime("%Y-%m")
    today = date.today()
    _, st.session_state.load_errors = asyncio.run(
        load_dashboard(st.session_state.api, st.session_state.store, today.year, today.month)
    )

store: RecordStore = st.session_state.store
names: DisplayNameCache = st.session_state.names
service = SalonService(st.session_state.api, store)

show_load_errors(st.session_state.load_errors)

if st.sidebar.button("🔄 Reload data"):
    logger.info("reloading all lists")
    st.session_state.load_errors = asyncio.run(refresh_all(st.session_state.api, store))
    st.rerun()

menu = st.sidebar.radio(
    "Menu",
    ["🏠 Overview", "👥 Clients", "✂️ Services", "🧾 Appointments", "💸 Expenses"]
)


def report(outcome) -> None:
    if outcome.ok:
        st.success(outcome.message)
    else:
        st.error(outcome.message)


if menu == "🏠 Overview":
    st.title("🏠 Monthly summary")
    month = st.text_input("Month (YYYY-MM)", key="month")
    result = service.monthly_summary(month)
    if not result.ok:
        st.error(result.message)
    else:
        summary = result.summary
        k1, k2, k3 = st.columns(3)
        with k1:
            st.metric("Income", money(summary.total_income))
        with k2:
            st.metric("Expenses", money(summary.total_expenses))
        with k3:
            st.metric("Net", money(summary.net))

        fig = px.bar(
            x=["Income", "Expenses", "Net"],
            y=[float(summary.total_income), float(summary.total_expenses), float(summary.net)],
            labels={"x": "", "y": settings.currency},
            title=f"Summary for {summary.month}",
            template="plotly_dark",
        )
        st.plotly_chart(fig, use_container_width=True)

        # last 6 months of income vs expenses, from the cached lists
        year, month_no = parse_month(month)
        periods = pd.period_range(end=pd.Period(year=year, month=month_no, freq="M"), periods=6, freq="M")
        rows = []
        for p in periods:
            s = service.monthly_summary(str(p)).summary
            rows.append({"month": str(p), "Income": float(s.total_income), "Expenses": float(s.total_expenses)})
        df_hist = pd.DataFrame(rows)
        fig_hist = px.line(df_hist, x="month", y=["Income", "Expenses"], markers=True, template="plotly_dark")
        st.plotly_chart(fig_hist, use_container_width=True)

elif menu == "👥 Clients":
    st.title("👥 Clients")
    with st.form("client_form", clear_on_submit=True):
        name = st.text_input("Name *")
        phone = st.text_input("Phone")
        notes = st.text_area("Notes")
        if st.form_submit_button("Save client"):
            report(service.create_client(name, phone, notes))

    rows = clients(store.records(CLIENT))
    if rows:
        df = pd.DataFrame([
            {"Name": c.name, "Phone": c.phone, "Notes": c.notes or format_date_simple(c.registered_at)}
            for c in rows
        ])
        st.dataframe(df, use_container_width=True, hide_index=True)
    else:
        st.info("No clients yet.")

elif menu == "✂️ Services":
    st.title("✂️ Services")
    with st.form("service_form", clear_on_submit=True):
        name = st.text_input("Service name *")
        category = st.text_input("Category")
        price = st.text_input("Base price", value="0")
        active = st.checkbox("Active", value=True)
        if st.form_submit_button("Save service"):
            report(service.create_service(name, category, price, active))

    rows = services(store.records(SERVICE))
    if rows:
        df = pd.DataFrame([
            {"Name": s.name, "Category": s.category, "Price": money(s.price), "Active": "Yes" if s.active else "No"}
            for s in rows
        ])
        st.dataframe(df, use_container_width=True, hide_index=True)
    else:
        st.info("No services yet.")

elif menu == "🧾 Appointments":
    st.title("🧾 Appointments")

    client_options = dict(store.options(CLIENT))
    service_options = dict(store.options(SERVICE))

    def _fill_amount():
        suggested = suggest_price(store, st.session_state.get("at_service"))
        if suggested is not None:
            st.session_state.at_amount = suggested

    # outside the form so that picking a service can pre-fill the amount
    client_ref = st.selectbox(
        "Client *", [""] + list(client_options),
        format_func=lambda k: client_options.get(k, "Select a client..."),
        key="at_client",
    )
    service_ref = st.selectbox(
        "Service *", [""] + list(service_options),
        format_func=lambda k: service_options.get(k, "Select a service..."),
        key="at_service",
        on_change=_fill_amount,
    )
    with st.form("appointment_form"):
        at_date = st.date_input("Date *", value=date.today())
        amount = st.text_input("Amount *", key="at_amount")
        payment = st.selectbox("Payment method *", [""] + PAYMENT_METHODS)
        notes = st.text_area("Notes")
        if st.form_submit_button("Save appointment"):
            outcome = service.create_appointment(
                date=at_date,
                client_ref=client_ref,
                service_ref=service_ref,
                amount=amount,
                payment_method=payment,
                notes=notes,
                client_name=client_options.get(client_ref, ""),
                service_name=service_options.get(service_ref, ""),
            )
            report(outcome)

    records = store.records(APPOINTMENT)
    if records:
        df = pd.DataFrame([displayable(appointment_row(r, names)) for r in records])
        st.dataframe(df, use_container_width=True, hide_index=True)
    else:
        st.info("No appointments yet.")

elif menu == "💸 Expenses":
    st.title("💸 Expenses")
    with st.form("expense_form", clear_on_submit=True):
        ex_date = st.date_input("Date *", value=date.today())
        category = st.text_input("Category *")
        description = st.text_input("Description")
        amount = st.text_input("Amount *")
        payment = st.selectbox("Payment method", [""] + PAYMENT_METHODS)
        notes = st.text_area("Notes")
        if st.form_submit_button("Save expense"):
            report(service.create_expense(
                date=ex_date,
                category=category,
                amount=amount,
                description=description,
                payment_method=payment,
                notes=notes,
            ))

    records = store.records(EXPENSE)
    if records:
        df = pd.DataFrame([displayable(expense_row(r)) for r in records])
        st.dataframe(df, use_container_width=True, hide_index=True)
    else:
        st.info("No expenses yet.")
