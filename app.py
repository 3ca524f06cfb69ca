import logging
import tempfile
from pathlib import Path

import streamlit as st
import pandas as pd

from flight_logbook.config import load_config
from flight_logbook.globe import load_globe_paths
from flight_logbook.importer import import_flight
from flight_logbook.render import make_paths_figure
from flight_logbook.storage import FlightStore

config = load_config()
logging.basicConfig(level=config.log_level)


@st.cache_resource
def _get_store() -> FlightStore:
    store = FlightStore(config.db_url)
    store.init_schema()
    return store


# -----------------------------
# Streamlit page setup
# -----------------------------
st.set_page_config(page_title="Flight Logbook", layout="wide")
st.title("✈️ Flight Logbook")
st.write("Upload a flight tracker CSV and its KML, enter the airports, and add the flight to your log.")

store = _get_store()


# -----------------------------
# Sidebar: import
# -----------------------------
with st.sidebar:
    st.header("Add flight")
    csv_upload = st.file_uploader("Track (CSV)", type=["csv"])
    kml_upload = st.file_uploader("Details (KML)", type=["kml"])

    departed = st.text_input("From (airport code)", max_chars=4).upper()
    arrived = st.text_input("To (airport code)", max_chars=4).upper()

    do_import = st.button("Import", disabled=csv_upload is None or kml_upload is None)

if do_import:
    if len(departed) < 3 or len(arrived) < 3:
        st.warning("Enter departure and arrival codes (at least 3 letters).")
    else:
        try:
            # uploads only exist in memory; stage them so the importer can copy them
            with tempfile.TemporaryDirectory() as tmp:
                csv_tmp = Path(tmp) / "upload.csv"
                kml_tmp = Path(tmp) / "upload.kml"
                csv_tmp.write_bytes(csv_upload.getvalue())
                kml_tmp.write_bytes(kml_upload.getvalue())
                record = import_flight(csv_tmp, kml_tmp, departed, arrived, store=store, data_dir=config.data_dir)
            st.success(f"Flight {record.flight_number} saved!")
        except Exception as e:
            st.error(f"Import failed: {e}")


# -----------------------------
# Display stored flights
# -----------------------------
flights = store.list_flights()

col1, col2, col3 = st.columns([1, 1, 1])
col1.metric("Flights", len(flights))
col2.metric("Flown (km)", f"{sum(f.distance_flown_m for f in flights) / 1000:,.0f}")
col3.metric("Airborne (h)", f"{sum(f.duration_minutes for f in flights) / 60:,.1f}")

st.subheader("Flights")
if len(flights) == 0:
    st.info("No flights yet. Import one from the sidebar.")
    st.stop()

df_flights = pd.DataFrame(
    [
        {
            "#": f.chronological_id,
            "date": f.date,
            "route": f"{f.departed_code} -> {f.arrived_code}",
            "airline": f.airline,
            "flight": f.flight_number,
            "aircraft": f.aircraft_model,
            "registration": f.registration,
            "direct_km": f.distance_direct_m / 1000,
            "flown_km": f.distance_flown_m / 1000,
            "minutes": f.duration_minutes,
            "link": f.external_link_url,
        }
        for f in flights
    ]
)
st.dataframe(df_flights, use_container_width=True)

st.subheader("Paths")
paths = load_globe_paths(flights)
fig = make_paths_figure(paths)
st.pyplot(fig, clear_figure=True)
