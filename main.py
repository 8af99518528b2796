"""
main.py — TestPrep CBT desktop entry point

Starts the REST API (uvicorn, background thread) and the Streamlit exam UI
(subprocess), then opens the UI in the browser.
"""

import os
import socket
import subprocess
import sys
import time
import threading
import logging
import traceback
import webbrowser

# ── Module path (must come first) ────────────────────────────────────────────
_BASE_DIR = os.path.dirname(os.path.abspath(__file__))
if _BASE_DIR not in sys.path:
    sys.path.insert(0, _BASE_DIR)

from config import BASE_DIR, LOG_FILE, DEFAULT_HOST, DEFAULT_PORT, DEFAULT_TIMEOUT

# ── Logging ──────────────────────────────────────────────────────────────────
class DummyStream:
    def write(self, data): pass
    def flush(self): pass
    def isatty(self): return False
    def close(self): pass

if sys.stdout is None: sys.stdout = DummyStream()
if sys.stderr is None: sys.stderr = DummyStream()

try:
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        handlers=[
            logging.FileHandler(LOG_FILE, encoding='utf-8'),
            logging.StreamHandler(sys.stdout)
        ]
    )
except PermissionError:
    # Log file locked by another process: console only
    logging.basicConfig(level=logging.INFO)

logger = logging.getLogger(__name__)

# ── Server / network helpers ─────────────────────────────────────────────────

def _find_free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind((DEFAULT_HOST, 0))
        return s.getsockname()[1]

def _port_available(port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        try:
            s.bind((DEFAULT_HOST, port))
            return True
        except OSError:
            return False

def _wait_for_server(port: int, timeout: float = DEFAULT_TIMEOUT) -> bool:
    deadline = time.time() + timeout
    while time.time() < deadline:
        try:
            with socket.create_connection((DEFAULT_HOST, port), timeout=0.5):
                return True
        except OSError:
            time.sleep(0.1)
    return False

def _start_api(port: int) -> None:
    try:
        import uvicorn
        from api.app import create_app
        logger.info(f"API server starting on port {port}")
        app = create_app()
        uvicorn.run(app, host=DEFAULT_HOST, port=port, log_level="error")
    except Exception:
        logger.error(f"API server error:\n{traceback.format_exc()}")

def _start_ui(port: int) -> subprocess.Popen:
    script = os.path.join(BASE_DIR, "streamlit_app.py")
    cmd = [
        sys.executable, "-m", "streamlit", "run", script,
        "--server.port", str(port),
        "--server.address", DEFAULT_HOST,
        "--server.headless", "true",
    ]
    logger.info(f"Streamlit UI starting on port {port}")
    return subprocess.Popen(cmd, cwd=BASE_DIR)

# ── Main ─────────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    logger.info("=== TestPrep CBT started ===")
    os.chdir(BASE_DIR)

    api_port = DEFAULT_PORT if _port_available(DEFAULT_PORT) else _find_free_port()
    api_thread = threading.Thread(target=_start_api, args=(api_port,), daemon=True)
    api_thread.start()

    ui_port = _find_free_port()
    ui_proc = _start_ui(ui_port)

    if _wait_for_server(ui_port):
        logger.info(f"UI ready, API on http://{DEFAULT_HOST}:{api_port}. Opening browser.")
        webbrowser.open(f"http://{DEFAULT_HOST}:{ui_port}")

        try:
            ui_proc.wait()
        except KeyboardInterrupt:
            logger.info("Stopped by user.")
            ui_proc.terminate()
    else:
        logger.error("UI did not start in time. Check for a leftover process on the port.")
        ui_proc.terminate()
        sys.exit(1)
