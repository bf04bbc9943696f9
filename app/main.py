import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import date, datetime

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from budgeting import config
from budgeting.calculations import (
    budget_status,
    calculate_balance,
    get_chart_data,
    get_date_range_data,
    get_monthly_data,
    month_key,
    total_balance,
)
from budgeting.constants import EXPENSE, FUND_SOURCES, INCOME, INCOME_CATEGORIES
from budgeting.date_ranges import PRESETS, default_range, preset_range
from budgeting.filters import local_datetime
from budgeting.formatting import (
    format_currency,
    format_millions,
    format_number,
    month_long_name,
    parse_formatted_number,
)
from budgeting.history import group_by_day, transactions_in_month
from budgeting.services import BudgetingService
from budgeting.storage import KeyValueStore, backup_file_name

config.configure_logging()
st.set_page_config(page_title="Budgeting", layout="wide")

if "service" not in st.session_state:
    service = BudgetingService(KeyValueStore(config.ensure_data_dir()))
    service.load()
    st.session_state.service = service

service: BudgetingService = st.session_state.service
state = service.state


def report(outcome, success_message):
    """Show the result of a service call; returns True on success."""
    if outcome.is_left():
        st.error(outcome.get_error()["message"])
        return False
    st.success(success_message)
    return True


def show_alerts():
    while service.alerts:
        st.warning(service.alerts.pop(0)["alert"])


def transactions_frame(transactions):
    return pd.DataFrame(
        [
            {
                "Tanggal": local_datetime(t.date).date().isoformat(),
                "Tipe": "Pemasukan" if t.type == INCOME else "Pengeluaran",
                "Kategori": t.category,
                "Sumber": t.source,
                "Jumlah": t.amount if t.type == INCOME else -t.amount,
                "Keterangan": t.description or "",
            }
            for t in transactions
        ],
        columns=["Tanggal", "Tipe", "Kategori", "Sumber", "Jumlah", "Keterangan"],
    )


menu = st.sidebar.radio(
    "Menu",
    ["🏠 Dashboard", "🧾 Transaksi", "🔁 Transfer", "🎯 Budget", "📜 History", "⚙️ Pengaturan"],
)

today = date.today()

if menu == "🏠 Dashboard":
    st.title("Dashboard")
    st.caption(f"{month_long_name(today.month - 1)} {today.year}")

    st.subheader("Saldo per Sumber Dana")
    cols = st.columns(len(FUND_SOURCES) + 1)
    for col, source in zip(cols, FUND_SOURCES):
        with col:
            st.metric(source, format_currency(calculate_balance(state.transactions, state.transfers, source)))
    with cols[-1]:
        st.metric("Total", format_currency(total_balance(state.transactions, state.transfers)))

    st.subheader("Ringkasan Bulan Ini")
    current = get_monthly_data(state.transactions, today.year, today.month - 1)
    k1, k2, k3 = st.columns(3)
    k1.metric("Pemasukan", format_currency(current.income))
    k2.metric("Pengeluaran", format_currency(current.expenses))
    k3.metric("Selisih", format_currency(current.net))

    st.subheader("Tren Bulanan (juta Rp)")
    chart = get_chart_data(state.transactions, config.CHART_MONTHS, today=today)
    fig = go.Figure()
    fig.add_trace(go.Bar(x=chart.months, y=chart.income_data, name="Pemasukan", marker_color="#10B981",
                         text=[format_millions(v) for v in chart.income_data]))
    fig.add_trace(go.Bar(x=chart.months, y=chart.expense_data, name="Pengeluaran", marker_color="#EF4444",
                         text=[format_millions(v) for v in chart.expense_data]))
    fig.update_layout(barmode="group", margin=dict(t=30, b=10, l=10, r=10))
    st.plotly_chart(fig, use_container_width=True)

    st.subheader("Filter Tanggal")
    labels = {label: pid for pid, (label, _) in PRESETS.items()}
    chosen = st.radio("Periode", list(labels), index=2, horizontal=True)
    preset = preset_range(labels[chosen], today)
    if preset is None:
        start_default, end_default = default_range(today)
        picked = st.date_input("Rentang", value=(start_default, end_default), key="dash_range")
        start, end = (picked[0], picked[1]) if len(picked) == 2 else (picked[0], picked[0])
    else:
        start, end = preset
    ranged = get_date_range_data(state.transactions, start, end)
    r1, r2, r3 = st.columns(3)
    r1.metric("Pemasukan", format_currency(ranged.income))
    r2.metric("Pengeluaran", format_currency(ranged.expenses))
    r3.metric("Selisih", format_currency(ranged.net))

elif menu == "🧾 Transaksi":
    st.title("Tambah Transaksi")
    kind = st.radio("Tipe", [INCOME, EXPENSE], format_func=lambda k: "Pemasukan" if k == INCOME else "Pengeluaran", horizontal=True)
    categories = list(INCOME_CATEGORIES) if kind == INCOME else state.category_names()

    with st.form("transaction_form", clear_on_submit=True):
        amount_text = st.text_input("Jumlah (Rp)", placeholder="0")
        category = st.selectbox("Kategori", [""] + categories)
        source = st.selectbox("Sumber Dana", FUND_SOURCES)
        when = st.date_input("Tanggal", value=today)
        description = st.text_input("Keterangan (opsional)")
        submitted = st.form_submit_button("Simpan Transaksi")

    if submitted:
        outcome = service.add_transaction(
            type=kind,
            amount=parse_formatted_number(amount_text),
            category=category,
            source=source,
            when=datetime.combine(when, datetime.now().time()),
            description=description,
        )
        report(outcome, "Transaksi berhasil ditambahkan")
        show_alerts()

elif menu == "🔁 Transfer":
    st.title("Transfer Saldo")
    st.caption("Pindahkan saldo antar sumber dana")

    c1, c2 = st.columns(2)
    with c1:
        from_source = st.selectbox("Dari", FUND_SOURCES, index=0)
        st.caption(f"Saldo: {format_currency(calculate_balance(state.transactions, state.transfers, from_source))}")
    with c2:
        to_source = st.selectbox("Ke", FUND_SOURCES, index=1)
        st.caption(f"Saldo: {format_currency(calculate_balance(state.transactions, state.transfers, to_source))}")

    amount_text = st.text_input("Jumlah Transfer (Rp)", placeholder="0")
    if amount_text:
        st.caption(f"Rp {format_number(amount_text)}")
    if st.button("Transfer"):
        outcome = service.add_transfer(from_source, to_source, parse_formatted_number(amount_text))
        report(outcome, "Transfer berhasil dilakukan")

    if service.state.transfers:
        st.subheader("Riwayat Transfer")
        st.table(pd.DataFrame([
            {"Tanggal": local_datetime(tr.date).date().isoformat(), "Dari": tr.from_source, "Ke": tr.to_source, "Jumlah": format_currency(tr.amount)}
            for tr in reversed(service.state.transfers)
        ]))

elif menu == "🎯 Budget":
    st.title("Budget Bulanan")
    current_month = month_key(today.year, today.month - 1)

    st.metric("Total Saldo Tersedia", format_currency(total_balance(state.transactions, ())))
    with st.form("budget_form", clear_on_submit=True):
        category = st.selectbox("Kategori", [""] + state.category_names())
        limit_text = st.text_input("Jumlah Budget (Rp)", placeholder="0")
        submitted = st.form_submit_button("Tetapkan Budget")
    if submitted:
        outcome = service.set_budget(category or None, parse_formatted_number(limit_text), current_month)
        report(outcome, "Budget berhasil ditetapkan")

    st.subheader("Status Budget Bulan Ini")
    month_budgets = [b for b in service.state.budgets if b.month == current_month]
    if not month_budgets:
        st.info("Belum ada budget untuk bulan ini")
    for budget in month_budgets:
        status = budget_status(budget, service.state.transactions)
        st.markdown(f"**{budget.category}**: {format_currency(status.spent)} dari {format_currency(budget.limit)}")
        st.progress(min(status.percentage, 100) / 100, text=f"{status.percentage:.1f}%")
        if status.over_budget:
            st.warning(f"Anda telah melebihi budget sebesar {format_currency(-status.remaining)}")

elif menu == "📜 History":
    st.title("History Transaksi")
    c1, c2 = st.columns(2)
    with c1:
        month = st.selectbox("Bulan", range(12), index=today.month - 1, format_func=month_long_name)
    with c2:
        year = st.number_input("Tahun", min_value=2000, max_value=2100, value=today.year, step=1)

    listed = transactions_in_month(state.transactions, int(year), month)
    totals = get_monthly_data(state.transactions, int(year), month)
    h1, h2 = st.columns(2)
    h1.metric("Pemasukan", format_currency(totals.income))
    h2.metric("Pengeluaran", format_currency(totals.expenses))

    if not listed:
        st.info("Tidak ada transaksi pada bulan ini")
    for day, items in group_by_day(listed):
        st.markdown(f"**{day.day} {month_long_name(day.month - 1)} {day.year}**")
        for t in items:
            sign = "+" if t.type == INCOME else "-"
            note = f" · {t.description}" if t.description else ""
            st.write(f"{t.category} ({t.source}){note}: {sign}{format_currency(t.amount)}")

    if listed:
        csv = transactions_frame(listed).to_csv(index=False)
        st.download_button(
            "⬇️ Download CSV",
            csv,
            file_name=f"transaksi-{month_key(int(year), month)}.csv",
            mime="text/csv",
        )

elif menu == "⚙️ Pengaturan":
    st.title("Pengaturan")

    st.subheader("Backup Data")
    exported = service.export_json()
    if exported.is_right():
        st.download_button(
            "⬇️ Ekspor Data",
            exported.get_or_else(""),
            file_name=backup_file_name(today),
            mime="application/json",
        )
    else:
        st.error(exported.get_error()["message"])

    uploaded = st.file_uploader("Impor Data", type=["json"])
    if uploaded is not None and st.button("Impor (menimpa data saat ini)"):
        text = uploaded.getvalue().decode("utf-8", errors="replace")
        report(service.import_json(text), "Data berhasil diimport")

    st.subheader("Kategori Pengeluaran")
    for category in service.state.categories:
        tag = " (default)" if category.is_default else ""
        st.write(f"- {category.name}{tag}")

    with st.form("add_category", clear_on_submit=True):
        new_name = st.text_input("Kategori baru")
        if st.form_submit_button("Tambah"):
            report(service.add_category(new_name), "Kategori berhasil ditambahkan")

    custom = [c.name for c in service.state.categories if not c.is_default]
    if custom:
        with st.form("edit_category"):
            target = st.selectbox("Kategori kustom", custom)
            renamed = st.text_input("Nama baru")
            rename_clicked = st.form_submit_button("Ubah")
            delete_clicked = st.form_submit_button("Hapus")
        if rename_clicked:
            report(service.rename_category(target, renamed), "Kategori berhasil diubah")
        if delete_clicked:
            report(service.remove_category(target), "Kategori berhasil dihapus")

    if st.button("Kembalikan kategori default"):
        report(service.reset_categories(), "Kategori default dikembalikan")
