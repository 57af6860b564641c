"""Entry point: launches the Streamlit app and opens the browser."""

import logging
import os
import sys
import threading
import time
import webbrowser
from pathlib import Path

import requests


PORT = 8501
URL = f"http://localhost:{PORT}"
LOG_LEVEL_ENV = "WFMCLIENT_LOG_LEVEL"


def _wait_and_open_browser() -> None:
    """Wait for the Streamlit server to become ready, then open the browser."""
    for _ in range(30):  # up to 30 seconds
        try:
            resp = requests.get(URL, timeout=2)
            if resp.status_code == 200:
                webbrowser.open(URL)
                return
        except requests.RequestException:
            pass
        time.sleep(1)
    logging.getLogger(__name__).warning("Streamlit did not come up on %s", URL)


def main() -> None:
    logging.basicConfig(
        level=os.environ.get(LOG_LEVEL_ENV, "INFO").upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    # Ensure the src directory is on the path
    src_dir = Path(__file__).resolve().parent / "src"
    if src_dir.exists() and str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))

    from streamlit.web import bootstrap

    app_path = str(src_dir / "wfmclient" / "app.py")

    # Open browser in a background thread once the server is up
    threading.Thread(target=_wait_and_open_browser, daemon=True).start()

    bootstrap.run(
        app_path,
        is_hello=False,
        args=[],
        flag_options={
            "server.headless": True,
            "server.port": PORT,
            "browser.gatherUsageStats": False,
        },
    )


if __name__ == "__main__":
    main()
