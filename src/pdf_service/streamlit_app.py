import base64
import os
import time

import requests
import streamlit as st

API_BASE = os.getenv("PDF_SERVICE_API_BASE", os.getenv("API_BASE", "http://localhost:3000")).rstrip("/")
REQUEST_TIMEOUT = float(os.getenv("PDF_SERVICE_UI_TIMEOUT", "120"))


def _encode_pdf(data: bytes) -> str:
    return "data:application/pdf;base64," + base64.b64encode(data).decode("ascii")


def _post_json(path: str, body: dict[str, object]) -> tuple[dict[str, object] | None, str | None]:
    """POST to the API and return ``(data, error)``; exactly one of them is set."""
    max_attempts = 3
    backoff = 0.5
    for attempt in range(1, max_attempts + 1):
        try:
            resp = requests.post(f"{API_BASE}{path}", json=body, timeout=REQUEST_TIMEOUT)
        except requests.RequestException as e:
            # network error: backoff and retry
            if attempt < max_attempts:
                time.sleep(backoff)
                backoff *= 1.5
                continue
            return None, f"Failed to connect to API: {e}"
        try:
            data = resp.json()
        except ValueError:
            return None, f"Unexpected response: {resp.status_code} {resp.text[:500]}"
        if not isinstance(data, dict):
            return None, f"Unexpected response: {resp.status_code} {resp.text[:500]}"
        if resp.status_code == 200 and data.get("success"):
            return data, None
        return None, f"{resp.status_code}: {data.get('error', resp.text[:500])}"
    return None, "Request failed after retries"


def convert_page(pdf_bytes: bytes, page_number: int, scale: float) -> tuple[bytes | None, str | None]:
    data, error = _post_json(
        "/api/pdf/convert",
        {"pdfBase64": _encode_pdf(pdf_bytes), "pageNumber": page_number, "scale": scale},
    )
    if data is None:
        return None, error
    image_uri = str(data.get("imageBase64", ""))
    _, _, payload = image_uri.partition(",")
    return base64.b64decode(payload), None


def extract_text(pdf_bytes: bytes) -> tuple[dict[str, object] | None, str | None]:
    return _post_json("/api/pdf/extract-text", {"pdfBase64": _encode_pdf(pdf_bytes)})


def _reset_state():
    for key in ["image", "extraction", "error"]:
        if key in st.session_state:
            del st.session_state[key]
    # Bump the uploader key to clear any previously uploaded file widget state
    st.session_state["upload_key"] = st.session_state.get("upload_key", 0) + 1


def main() -> None:
    st.set_page_config(page_title="PDF Conversion Service", page_icon="📄", layout="centered")
    st.title("📄 PDF Conversion Service")
    st.caption(f"API base: {API_BASE}")

    if st.button("Restart", type="secondary"):
        _reset_state()
        st.rerun()

    if "upload_key" not in st.session_state:
        st.session_state["upload_key"] = 0
    uploaded = st.file_uploader(
        "Upload a PDF",
        type=["pdf"],
        key=f"uploader-{st.session_state['upload_key']}",
    )
    if not uploaded:
        return

    pdf_bytes = uploaded.getvalue()
    col1, col2 = st.columns([1, 1])
    with col1:
        page_number = int(st.number_input("Page", min_value=1, value=1, step=1))
    with col2:
        scale = float(st.number_input("Scale", min_value=0.1, max_value=10.0, value=2.0, step=0.5))

    col3, col4 = st.columns([1, 1])
    with col3:
        if st.button("Render page", type="primary"):
            with st.spinner("Rendering..."):
                image, error = convert_page(pdf_bytes, page_number, scale)
            st.session_state["image"] = image
            st.session_state["error"] = error
    with col4:
        if st.button("Extract text"):
            with st.spinner("Extracting..."):
                extraction, error = extract_text(pdf_bytes)
            st.session_state["extraction"] = extraction
            st.session_state["error"] = error

    if image := st.session_state.get("image"):
        st.image(image, caption=f"Page {page_number}")
        st.download_button("Download PNG", data=image, file_name=f"page-{page_number}.png", mime="image/png")

    if extraction := st.session_state.get("extraction"):
        st.success(f"{extraction.get('numPages')} page(s)")
        st.text_area("Text", value=str(extraction.get("text", "")), height=300)
        with st.expander("Metadata"):
            st.json({"info": extraction.get("info"), "metadata": extraction.get("metadata")})

    if err := st.session_state.get("error"):
        st.error(err)


if __name__ == "__main__":
    main()
