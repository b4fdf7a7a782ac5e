"""Streamlit demo dashboard for the HBA hotel search and hold flow."""

from __future__ import annotations

import datetime
from typing import Any, Dict, List, Optional

import pandas as pd
import requests
import streamlit as st

# ==========================================
# Configuration & Constants
# ==========================================
# Point this to your local FastAPI server
API_BASE_URL = "http://127.0.0.1:8000"

SORT_OPTIONS = {
    "Rating (high to low)": "rating-desc",
    "Rating (low to high)": "rating-asc",
    "Price (low to high)": "price-asc",
    "Price (high to low)": "price-desc",
    "Name": "name-asc",
    "Popularity": "popularity-desc",
}

st.set_page_config(
    page_title="HBA Hotel Booking",
    page_icon="🏨",
    layout="wide",
)

# ==========================================
# API Helper Functions
# ==========================================
def fetch_search(
    location: str,
    check_in: str,
    check_out: str,
    guests: int,
    sort_by: str,
    min_rating: Optional[float],
) -> Optional[Dict[str, Any]]:
    """Calls the backend hotel search."""
    try:
        response = requests.post(
            f"{API_BASE_URL}/search",
            json={
                "location": location,
                "check_in": check_in,
                "check_out": check_out,
                "guests": guests,
                "sort_by": sort_by,
                "filters": {"min_rating": min_rating},
            },
            timeout=5,
        )
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        st.error(f"Backend connection failed: {e}")
        return None


def create_hold(payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Places a temporary hold on a room type."""
    try:
        response = requests.post(f"{API_BASE_URL}/holds", json=payload, timeout=5)
        if response.status_code == 409:
            st.warning("This room was just reserved by another guest. Please choose another room or try again.")
            return None
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        st.error(f"Could not reserve room: {e}")
        return None


def fetch_remaining(hold_id: str) -> int:
    try:
        response = requests.get(f"{API_BASE_URL}/holds/{hold_id}/remaining", timeout=5)
        response.raise_for_status()
        return int(response.json().get("remaining_seconds", 0))
    except requests.exceptions.RequestException:
        return 0


def extend_hold(hold_id: str) -> Optional[Dict[str, Any]]:
    try:
        response = requests.post(f"{API_BASE_URL}/holds/{hold_id}/extend", timeout=5)
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        st.error(f"Your hold expired, please reserve again ({e})")
        return None


def release_hold(hold_id: str) -> None:
    try:
        requests.delete(f"{API_BASE_URL}/holds/{hold_id}", timeout=5)
    except requests.exceptions.RequestException as e:
        st.error(f"Release failed: {e}")


def confirm_booking(payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    try:
        response = requests.post(f"{API_BASE_URL}/bookings", json=payload, timeout=10)
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        st.error(f"Booking failed: {e}")
        return None


def _nights(check_in: datetime.date, check_out: datetime.date) -> int:
    return max(1, (check_out - check_in).days)


def _rooms_table(hotels: List[Dict[str, Any]], guests: int) -> pd.DataFrame:
    rows = []
    for hotel in hotels:
        for room in hotel["room_types"]:
            if room["capacity"] < guests:
                continue
            rows.append(
                {
                    "hotel_id": hotel["hotel_id"],
                    "hotel": hotel["name"],
                    "location": hotel["location"],
                    "rating": hotel["rating"],
                    "room_type_id": room["room_type_id"],
                    "room": room["name"],
                    "capacity": room["capacity"],
                    "price_per_night": room["price"],
                }
            )
    return pd.DataFrame(rows)


# ==========================================
# UI Page Functions
# ==========================================
def render_search_page() -> None:
    st.header("🔍 Find a Hotel")

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        location = st.text_input("Destination", "Florida")
    with col2:
        check_in = st.date_input("Check-in", datetime.date.today() + datetime.timedelta(days=7))
    with col3:
        check_out = st.date_input("Check-out", datetime.date.today() + datetime.timedelta(days=9))
    with col4:
        guests = st.number_input("Guests", min_value=1, max_value=8, value=2)

    col5, col6 = st.columns(2)
    with col5:
        sort_label = st.selectbox("Sort by", list(SORT_OPTIONS))
    with col6:
        min_rating = st.slider("Minimum rating", 0.0, 5.0, 0.0, 0.1)

    if st.button("Search", type="primary"):
        result = fetch_search(
            location,
            str(check_in),
            str(check_out),
            int(guests),
            SORT_OPTIONS[sort_label],
            min_rating or None,
        )
        if result:
            st.session_state["search"] = {
                "hotels": result.get("hotels", []),
                "check_in": check_in,
                "check_out": check_out,
                "guests": int(guests),
            }

    search = st.session_state.get("search")
    if not search:
        return
    table = _rooms_table(search["hotels"], search["guests"])
    if table.empty:
        st.info("No available rooms match your search.")
        return

    st.write(f"### {len(search['hotels'])} hotels available")
    st.dataframe(table, use_container_width=True)

    choice = st.selectbox(
        "Room to reserve",
        table.index,
        format_func=lambda idx: f"{table.at[idx, 'hotel']} - {table.at[idx, 'room']}",
    )
    if st.button("Reserve room"):
        row = table.loc[choice]
        nights = _nights(search["check_in"], search["check_out"])
        hold = create_hold(
            {
                "hotel_id": row["hotel_id"],
                "room_type_id": row["room_type_id"],
                "check_in": str(search["check_in"]),
                "check_out": str(search["check_out"]),
                "guest_count": search["guests"],
                "total_price": float(row["price_per_night"]) * nights,
            }
        )
        if hold:
            st.session_state["hold"] = hold
            st.success("Room reserved! Continue on the Checkout page.")


def render_checkout_page() -> None:
    st.header("🛎️ Checkout")
    hold = st.session_state.get("hold")
    if not hold:
        st.info("Reserve a room from the search page first.")
        return

    remaining = fetch_remaining(hold["hold_id"])
    minutes, seconds = divmod(remaining, 60)
    metric_col1, metric_col2 = st.columns(2)
    metric_col1.metric("Hold expires in", f"{minutes:02d}:{seconds:02d}")
    metric_col2.metric("Total price", f"${hold['total_price']:,.2f}")

    if remaining == 0:
        st.error("Your hold expired, please reserve again.")
        st.session_state.pop("hold", None)
        return

    col1, col2 = st.columns(2)
    if col1.button("Extend 5 minutes"):
        extended = extend_hold(hold["hold_id"])
        if extended:
            st.session_state["hold"] = extended
    if col2.button("Cancel reservation"):
        release_hold(hold["hold_id"])
        st.session_state.pop("hold", None)
        st.info("Reservation released.")
        return

    with st.form("guest_details"):
        name = st.text_input("Full name")
        email = st.text_input("Email")
        phone = st.text_input("Phone (10 digits)")
        special_requests = st.text_area("Special requests")
        submitted = st.form_submit_button("Confirm booking", type="primary")

    if submitted:
        result = confirm_booking(
            {
                "hotel_id": hold["hotel_id"],
                "room_type_id": hold["room_type_id"],
                "check_in": hold["check_in"],
                "check_out": hold["check_out"],
                "guest_count": hold["guest_count"],
                "total_price": hold["total_price"],
                "hold_id": hold["hold_id"],
                "guest": {
                    "name": name,
                    "email": email,
                    "phone": phone,
                    "special_requests": special_requests or None,
                },
            }
        )
        if result:
            booking = result["booking"]
            st.session_state.pop("hold", None)
            st.success(f"Booking {booking['booking_id'].upper()} confirmed!")
            if not result.get("confirmation_sent"):
                st.warning("Booking confirmed, but the confirmation email could not be sent.")


# ==========================================
# Main App Router
# ==========================================
def main() -> None:
    st.sidebar.title("HBA Hotel Booking")
    st.sidebar.markdown("---")

    page = st.sidebar.radio("Navigation", ["Search", "Checkout"])

    st.sidebar.markdown("---")
    st.sidebar.caption(f"API: {API_BASE_URL}")

    if page == "Search":
        render_search_page()
    elif page == "Checkout":
        render_checkout_page()


if __name__ == "__main__":
    main()
