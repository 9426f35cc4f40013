# streamlit_app.py
import streamlit as st
import requests, os

API_URL = os.getenv("API_URL", "http://localhost:8000")

st.title("Mongo → BigQuery migration")

st.markdown("Copies a whole MongoDB collection into a BigQuery table. The table is **dropped and re-created**.")

collection = st.text_input("MongoDB collection")
table = st.text_input("BigQuery table")

if st.button("Migrate"):
    if not collection or not table:
        st.error("Please give both a collection and a table name")
    else:
        payload = {"source_collection_name": collection, "destination_table_name": table}
        with st.spinner("Migrating..."):
            resp = requests.post(f"{API_URL}/migrate", json=payload)
        if resp.ok:
            st.success(resp.json().get("message"))
            st.json(resp.json())
        else:
            try:
                detail = resp.json().get("detail", {})
            except ValueError:
                st.text(resp.text)
            else:
                st.error(detail.get("message") if isinstance(detail, dict) else detail)
                if isinstance(detail, dict) and detail.get("failed_rows"):
                    st.write("Rejected rows:")
                    st.json(detail["failed_rows"])

if st.button("Show last error"):
    resp = requests.get(f"{API_URL}/last_error")
    if resp.status_code == 404:
        st.info("no errors logged")
    else:
        st.json(resp.json())
