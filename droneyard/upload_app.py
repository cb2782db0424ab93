# droneyard/upload_app.py
# Run with: streamlit run droneyard/upload_app.py
import streamlit as st

from droneyard.aws_clients import get_batch_client, get_s3_client
from droneyard.config import get_settings
from droneyard.uploads import (
    jobs_frame,
    list_jobs,
    project_prefix,
    upload_messages,
    upload_photos,
    write_dispatch_marker,
)

PHOTO_TYPES = ["jpg", "jpeg", "png", "tif", "tiff"]


def init_session_state():
    defaults = {
        "uploaded_keys": [],
        "prefix": None,
        "dispatched_key": None,
    }
    for key, default in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = default


def reset_session_state():
    st.session_state.uploaded_keys = []
    st.session_state.prefix = None
    st.session_state.dispatched_key = None
    st.success("🔄 Session state has been reset!")
    st.rerun()


def main():
    settings = get_settings()
    s3 = get_s3_client()
    batch = get_batch_client()
    bucket = settings.require("BUCKET_NAME")

    init_session_state()

    st.title("🛩️ Drone Photo Uploader")

    col1, col2 = st.columns([1, 6])
    with col1:
        if st.button("🔄Reset"):
            reset_session_state()

    status_placeholder = st.empty()

    with col2:
        project = st.text_input("Project name", placeholder="site42")
        photos = st.file_uploader("Drone photos", type=PHOTO_TYPES, accept_multiple_files=True)

    if project and photos and st.button("📤 Upload photos"):
        try:
            prefix = project_prefix(project)
        except ValueError as e:
            status_placeholder.error(f"❌ {e}")
        else:
            with st.spinner(f"Uploading {len(photos)} photo(s)..."):
                uploaded, skipped = upload_photos(s3, bucket, prefix, photos)
            st.session_state.prefix = prefix
            st.session_state.uploaded_keys = st.session_state.uploaded_keys + uploaded
            with status_placeholder.container():
                for level, text in upload_messages(bucket, prefix, uploaded, skipped):
                    getattr(st, level)(text)

    # --- Start Processing ---
    if st.session_state.prefix and st.session_state.uploaded_keys:
        st.markdown(f"**Project prefix:** `{st.session_state.prefix}` "
                    f"({len(st.session_state.uploaded_keys)} photo(s))")
        if st.session_state.dispatched_key:
            st.info(f"Already dispatched via `{st.session_state.dispatched_key}`.")
        elif st.button("🚀 Start Processing"):
            key = write_dispatch_marker(s3, bucket, st.session_state.prefix, settings.TRIGGER_SUFFIX)
            st.session_state.dispatched_key = key
            st.success(f"✅ Dispatch marker written: `{key}`. You will be notified by email.")

    # --- Queue overview ---
    st.markdown("### 🧩 Jobs in queue")
    if settings.JOB_QUEUE and st.button("Refresh jobs"):
        with st.spinner("Listing jobs..."):
            df = jobs_frame(list_jobs(batch, settings.JOB_QUEUE))
        if df.empty:
            st.warning("No jobs found.")
        else:
            st.dataframe(df)


if __name__ == "__main__":
    main()
