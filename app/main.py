"""
Streamlit Frontend for Expense Tracker

The page users see: a summary, a filter, the list of expenses and a form
to add one. All data comes from the RPC server through ExpenseApiClient.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. The list always mirrors the server (reloaded on every filter change)
3. Clear error messages
4. Sample data is only shown with a visible demo notice
"""

import html
from datetime import date

import streamlit as st

from expense_tracker.client import ExpenseApiClient, RpcError, RpcValidationError
from expense_tracker.config import get_settings
from expense_tracker.logging_setup import configure_logging
from expense_tracker.models.expense import (
    Expense,
    ExpenseCategory,
    ExpenseCreate,
    ExpenseFilter,
)
from expense_tracker.presentation import ExpenseBoard


# Page configuration
st.set_page_config(
    page_title="Expense Tracker",
    page_icon="💰",
    layout="wide",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .expense-row {
        padding: 12px 16px;
        background-color: #ffffff;
        border: 1px solid #e5e7eb;
        border-radius: 10px;
        margin: 8px 0;
    }
    .expense-amount {
        font-size: 1.3em;
        font-weight: bold;
        color: #111827;
        text-align: right;
    }
    .expense-meta {
        color: #6b7280;
        font-size: 0.9em;
    }
    .category-badge {
        padding: 2px 8px;
        border-radius: 8px;
        font-size: 0.85em;
    }
    .demo-box {
        padding: 12px 16px;
        background-color: #fff3cd;
        border-radius: 10px;
        border-left: 5px solid #ffc107;
        margin: 10px 0;
    }
</style>
""", unsafe_allow_html=True)


CATEGORY_EMOJIS = {
    ExpenseCategory.FOOD: "🍽️",
    ExpenseCategory.TRANSPORT: "🚗",
    ExpenseCategory.HOUSING: "🏠",
    ExpenseCategory.ENTERTAINMENT: "🎬",
    ExpenseCategory.UTILITIES: "💡",
    ExpenseCategory.SHOPPING: "🛍️",
    ExpenseCategory.SALARY: "💰",
}

CATEGORY_COLORS = {
    ExpenseCategory.FOOD: "#ffedd5",
    ExpenseCategory.TRANSPORT: "#dbeafe",
    ExpenseCategory.HOUSING: "#dcfce7",
    ExpenseCategory.ENTERTAINMENT: "#f3e8ff",
    ExpenseCategory.UTILITIES: "#fef9c3",
    ExpenseCategory.SHOPPING: "#fce7f3",
    ExpenseCategory.SALARY: "#d1fae5",
}

MONTHS = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


@st.cache_resource
def get_client() -> ExpenseApiClient:
    """Get or create the RPC client (cached)."""
    configure_logging(get_settings().server.log_level)
    return ExpenseApiClient()


def get_board() -> ExpenseBoard:
    """The board lives in session state so it survives reruns."""
    if "board" not in st.session_state:
        st.session_state.board = ExpenseBoard(get_client())
    return st.session_state.board


def main():
    """Main application entry point."""
    board = get_board()

    if not board.loaded:
        with st.spinner("Loading expenses..."):
            board.load_expenses()

    render_header(board)
    render_summary(board)

    if board.demo_mode:
        st.markdown(f"""
        <div class="demo-box">
            <strong>Demo Mode:</strong> the expense server could not be reached,
            showing sample data. Nothing here is saved.<br>
            <small>{html.escape(board.last_error or "")}</small>
        </div>
        """, unsafe_allow_html=True)

    if board.show_form:
        render_form(board)

    render_filters(board)
    render_list(board)


def render_header(board: ExpenseBoard):
    col1, col2 = st.columns([4, 1])

    with col1:
        st.title("💰 Expense Tracker")
        st.markdown("Keep track of your spending and manage your budget")

    with col2:
        if st.button("➕ Add Expense", type="primary", disabled=board.show_form):
            board.open_form()
            st.rerun()


def render_summary(board: ExpenseBoard):
    summary = board.summary()

    col1, col2, col3 = st.columns(3)
    col1.metric("Total Expenses", f"${summary.total_amount:,.2f}")
    col2.metric("This Month", f"${summary.this_month_amount:,.2f}")
    col3.metric("Total Transactions", summary.transaction_count)


def render_filters(board: ExpenseBoard):
    """Category / month / year selectors. Any change reloads the list."""
    st.subheader("🔍 Filters")

    current_year = date.today().year
    years = [current_year - i for i in range(5)]
    active = board.filter

    col1, col2, col3, col4 = st.columns([2, 2, 2, 1])

    with col1:
        category = st.selectbox(
            "Category",
            options=[None] + list(ExpenseCategory),
            index=0 if active.category is None else list(ExpenseCategory).index(active.category) + 1,
            format_func=lambda c: "📋 All Categories" if c is None else f"{CATEGORY_EMOJIS[c]} {c.value}",
        )

    with col2:
        month = st.selectbox(
            "Month",
            options=[None] + list(range(1, 13)),
            index=active.month or 0,
            format_func=lambda m: "All Months" if m is None else MONTHS[m - 1],
        )

    with col3:
        year_options = [None] + years
        if active.year is not None and active.year not in years:
            year_options.append(active.year)
        year = st.selectbox(
            "Year",
            options=year_options,
            index=year_options.index(active.year),
            format_func=lambda y: "All Years" if y is None else str(y),
        )

    with col4:
        st.write("")
        clear = st.button("✖ Clear filters", disabled=active.is_empty)

    new_filter = ExpenseFilter() if clear else ExpenseFilter(
        category=category,
        month=month,
        year=year,
    )

    if new_filter != board.filter:
        with st.spinner("Loading expenses..."):
            board.set_filter(new_filter)
        st.rerun()


def render_list(board: ExpenseBoard):
    st.subheader("Recent Expenses")

    if board.is_loading_expenses:
        st.info("Loading...")
        return

    if not board.expenses:
        st.markdown("""
        ### 🧾 No expenses found
        Start tracking your expenses by adding your first transaction.
        """)
        return

    for expense in board.expenses:
        render_expense(expense)


def render_expense(expense: Expense):
    emoji = CATEGORY_EMOJIS[expense.category]
    color = CATEGORY_COLORS[expense.category]

    st.markdown(f"""
    <div class="expense-row">
        <div style="display: flex; justify-content: space-between;">
            <div>
                <span style="font-size: 1.5em;">{emoji}</span>
                <strong>{html.escape(expense.description)}</strong><br>
                <span class="expense-meta">📅 {expense.date.strftime('%d %b %Y')}</span>
                <span class="category-badge" style="background-color: {color};">
                    {expense.category.value}
                </span>
            </div>
            <div>
                <div class="expense-amount">${expense.amount:,.2f}</div>
                <div class="expense-meta">ID: {expense.id}</div>
            </div>
        </div>
    </div>
    """, unsafe_allow_html=True)


def render_form(board: ExpenseBoard):
    """The add-expense form."""
    st.markdown("---")
    st.subheader("💰 Add New Expense")

    with st.form("add_expense", clear_on_submit=False):
        amount = st.number_input(
            "Amount ($)",
            min_value=0.0,
            step=0.01,
            format="%.2f",
        )
        expense_date = st.date_input(
            "Date",
            value=date.today(),
        )
        description = st.text_input(
            "Description",
            placeholder="What did you spend on?",
        )
        category = st.selectbox(
            "Category",
            options=list(ExpenseCategory),
            index=None,
            placeholder="Select a category",
            format_func=lambda c: f"{CATEGORY_EMOJIS[c]} {c.value}",
        )

        col1, col2 = st.columns(2)
        with col1:
            submitted = st.form_submit_button("💾 Save Expense", type="primary")
        with col2:
            cancelled = st.form_submit_button("Cancel")

    if cancelled:
        board.close_form()
        st.rerun()

    if submitted:
        if amount <= 0:
            st.error("Please enter an amount greater than zero")
        elif not description.strip():
            st.error("Please describe what you spent on")
        elif category is None:
            st.error("Please select a category")
        else:
            try:
                with st.spinner("Saving..."):
                    board.create_expense(ExpenseCreate(
                        amount=str(amount),
                        date=expense_date,
                        description=description,
                        category=category,
                    ))
                st.rerun()
            except RpcValidationError as e:
                st.error(f"The server rejected this expense: {', '.join(e.fields)}")
            except RpcError as e:
                st.error(f"Failed to save: {str(e)}")

    st.markdown("---")


if __name__ == "__main__":
    main()
