"""
Launcher: starts the FastAPI services and the Streamlit client together.
"""

import atexit
import logging
import os
import signal
import subprocess
import sys
import time
import webbrowser

import requests

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
logger = logging.getLogger("launcher")

BACKEND_PORT = int(os.environ.get("SC_BACKEND_PORT", "8000"))
FRONTEND_PORT = int(os.environ.get("SC_FRONTEND_PORT", "8501"))

_processes = []


def cleanup():
    for proc in _processes:
        if proc.poll() is not None:
            continue
        try:
            if sys.platform == "win32":
                subprocess.run(["taskkill", "/F", "/T", "/PID", str(proc.pid)], capture_output=True)
            else:
                os.killpg(os.getpgid(proc.pid), signal.SIGTERM)
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning("could not stop pid %s cleanly (%s); killing", proc.pid, e)
            proc.kill()


def signal_handler(signum, frame):
    logger.info("Shutting down...")
    cleanup()
    sys.exit(0)


def start(args, cwd):
    kwargs = {} if sys.platform == "win32" else {"start_new_session": True}
    proc = subprocess.Popen(args, cwd=cwd, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL, **kwargs)
    _processes.append(proc)
    return proc


def wait_for_backend(url: str, timeout: float = 15.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            if requests.get(url, timeout=1).ok:
                return True
        except requests.exceptions.RequestException:
            pass
        time.sleep(0.5)
    return False


def main():
    logger.info("Starting Student Companion")

    atexit.register(cleanup)
    signal.signal(signal.SIGINT, signal_handler)
    if sys.platform != "win32":
        signal.signal(signal.SIGTERM, signal_handler)

    root = os.path.dirname(os.path.abspath(__file__))

    backend = start(
        [sys.executable, "-m", "uvicorn", "main:app", "--reload", "--port", str(BACKEND_PORT)],
        os.path.join(root, "backend"),
    )
    if not wait_for_backend(f"http://localhost:{BACKEND_PORT}/health"):
        logger.warning("Services not answering yet; the client will work from local data")

    frontend = start(
        [sys.executable, "-m", "streamlit", "run", "app.py",
         "--server.headless", "true", "--server.port", str(FRONTEND_PORT)],
        os.path.join(root, "frontend"),
    )

    logger.info("Services: http://localhost:%d/docs", BACKEND_PORT)
    logger.info("Client:   http://localhost:%d", FRONTEND_PORT)
    logger.info("Press Ctrl+C to stop")

    time.sleep(2)
    webbrowser.open(f"http://localhost:{FRONTEND_PORT}")

    try:
        while True:
            if backend.poll() is not None:
                logger.error("Services stopped unexpectedly")
                break
            if frontend.poll() is not None:
                logger.error("Client stopped unexpectedly")
                break
            time.sleep(1)
    except KeyboardInterrupt:
        pass
    finally:
        cleanup()


if __name__ == "__main__":
    main()
