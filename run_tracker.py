# run_tracker.py
"""
Start the tracker server.

    python run_tracker.py

Host, port and heartbeat interval come from config.py (and therefore
from TRACKER_HOST, TRACKER_PORT and HEARTBEAT_INTERVAL).
"""
import uvicorn

from config import LOG_LEVEL, TRACKER_HOST, TRACKER_PORT, configure_logging


def main() -> None:
    configure_logging()
    print(f"Starting Tracker on {TRACKER_HOST}:{TRACKER_PORT}...")
    try:
        uvicorn.run(
            "network.tracker:app",
            host=TRACKER_HOST,
            port=TRACKER_PORT,
            log_level=LOG_LEVEL.lower(),
        )
    except KeyboardInterrupt:
        print("\nShutting down tracker...")


if __name__ == "__main__":
    main()
