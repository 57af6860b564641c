"""Streamlit UI for WFM Client."""

from __future__ import annotations

import logging
import webbrowser

import streamlit as st

from wfmclient.api_decoder import WfmError
from wfmclient.connector import WfmConnector
from wfmclient.models import ServerEntry, ServerOutcome
from wfmclient.server_store import ServerStore, ServerStoreError
from wfmclient.settings import Settings
from wfmclient.tree_builder import iter_paths, render_tree
from wfmclient.url_parser import ServerURLError

logger = logging.getLogger(__name__)


def _qp(key: str, default: str = "") -> str:
    """Read a query parameter, returning *default* if absent."""
    params = st.query_params
    return params.get(key, default)


def main() -> None:
    st.set_page_config(
        page_title="WFM Client",
        page_icon="📁",
        layout="wide",
    )

    # Hide Streamlit's default toolbar (Deploy, Stop, etc.)
    st.markdown(
        "<style>[data-testid='stToolbar'] { display: none; }</style>",
        unsafe_allow_html=True,
    )

    try:
        settings = Settings.load()
    except OSError as exc:
        st.error(f"Error loading settings: {exc}")
        st.stop()

    store = ServerStore(settings.server_list_file)
    try:
        servers = store.sort()
    except OSError as exc:
        st.error(f"Error reading server list: {exc}")
        servers = []

    # --- Header with settings popover ---
    header_left, header_right = st.columns([8, 1])
    with header_left:
        st.title("WFM Client")
    with header_right:
        st.markdown("<div style='height: 1.5rem'></div>", unsafe_allow_html=True)
        with st.popover("⚙", use_container_width=True):
            st.subheader("Settings")
            download_dir = st.text_input(
                "Download directory",
                value=str(settings.download_dir),
                help="Downloaded files are stored here, one folder per server.",
            )
            if st.button("Save", key="save_settings"):
                try:
                    settings.set_download_dir(download_dir)
                    st.success("Saved.")
                except OSError as exc:
                    st.error(f"Error saving settings: {exc}")

    st.caption("Browse and download files from Web File Manager servers.")

    with st.sidebar:
        _server_forms(store, servers)

    refresh_clicked = st.button("Refresh", type="primary", use_container_width=True)
    if refresh_clicked or "tree" not in st.session_state:
        _refresh(store.load())

    _, outcomes = st.session_state["tree"]
    _show_outcomes(outcomes)
    _file_picker(outcomes, settings)


def _server_forms(store: ServerStore, servers: list[ServerEntry]) -> None:
    st.header("Servers")

    with st.form("add_server", clear_on_submit=True):
        st.subheader("Add server")
        name = st.text_input("Name")
        url = st.text_input("URL", placeholder="https://example.com/wfm/")
        if st.form_submit_button("Add"):
            _apply(lambda: store.add(name, url), "Error adding server")

    names = [s.name for s in servers]
    if not names:
        st.info("No servers yet.")
        return

    preselected = _qp("server")
    index = names.index(preselected) if preselected in names else 0

    with st.form("edit_server"):
        st.subheader("Edit server")
        old_name = st.selectbox("Server", names, index=index, key="edit_target")
        current = store.get(old_name)
        new_name = st.text_input("New name", value=current.name if current else "")
        new_url = st.text_input("New URL", value=current.url if current else "")
        if st.form_submit_button("Save"):
            _apply(lambda: store.update(old_name, new_name, new_url), "Error editing server")

    with st.form("remove_server"):
        st.subheader("Remove server")
        target = st.selectbox("Server", names, index=index, key="remove_target")
        if st.form_submit_button("Remove"):
            _apply(lambda: store.remove(target), "Error removing server")


def _apply(change, error_title: str) -> None:
    """Run a server list change, then reload the tree."""
    try:
        change()
    except (ServerStoreError, ServerURLError, OSError) as exc:
        st.error(f"{error_title}: {exc}")
        return
    st.session_state.pop("tree", None)
    st.rerun()


def _refresh(servers: list[ServerEntry]) -> None:
    with WfmConnector() as connector, st.spinner("Connecting to servers..."):
        st.session_state["tree"] = connector.load_servers(servers)


def _show_outcomes(outcomes: list[ServerOutcome]) -> None:
    if not outcomes:
        st.info("Add a server in the sidebar to get started.")
        return

    for outcome in outcomes:
        title = f"{outcome.entry.name} ({outcome.entry.url})"
        if not outcome.ok:
            st.error(
                f"Error connecting server {title}: {outcome.error}. "
                "This server is not displayed. Remove it in the sidebar if "
                "the problem persists."
            )
            continue
        with st.expander(title, expanded=len(outcomes) == 1):
            tree = render_tree(outcome.node)
            st.code(tree or "(empty)", language=None)


def _file_picker(outcomes: list[ServerOutcome], settings: Settings) -> None:
    connected = {o.entry.name: o for o in outcomes if o.ok}
    if not connected:
        return

    st.subheader("Open file")
    server_col, path_col = st.columns([1, 3])
    with server_col:
        server_name = st.selectbox("Server", list(connected))
    outcome = connected[server_name]
    leaves = list(iter_paths(outcome.node, leaves_only=True))
    with path_col:
        path = st.selectbox("File", leaves)

    if st.button("Download and open", disabled=not path):
        _download(outcome.entry, path, settings)

    if "download" in st.session_state:
        _show_download(st.session_state["download"])


def _download(entry: ServerEntry, path: str, settings: Settings) -> None:
    try:
        with WfmConnector() as connector, st.spinner(f"Downloading {path}..."):
            local = connector.fetch_file(entry, path, settings.download_dir)
    except WfmError as exc:
        logger.warning("Download of %s from %s failed: %s", path, entry.name, exc)
        st.error(f"Error downloading file: {exc}")
        return

    if local is None:
        st.warning(f"{path} is a directory.")
        return

    st.session_state["download"] = {"path": local, "data": local.read_bytes()}
    webbrowser.open(local.resolve().as_uri())


def _show_download(result: dict) -> None:
    local = result["path"]
    st.success(f"Saved to {local}")
    st.download_button(
        label=f"Save a copy of {local.name}",
        data=result["data"],
        file_name=local.name,
        use_container_width=True,
    )


if __name__ == "__main__":
    main()
