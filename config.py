# config.py
"""
Configuration file for the tracker server.
Centralizes all service parameters for easy management and tuning.
Every value can be overridden through the environment.
"""
import logging
import os
import sys

# Network Configuration
# Address the tracker binds to
TRACKER_HOST = os.getenv("TRACKER_HOST", "127.0.0.1")

# Port the tracker listens on
TRACKER_PORT = int(os.getenv("TRACKER_PORT", "3000"))

# Tracker URL used by worker nodes
DEFAULT_TRACKER_URL = os.getenv(
    "TRACKER_URL", f"http://{TRACKER_HOST}:{TRACKER_PORT}"
)

# Timeout for requests from nodes to the tracker in seconds
CLIENT_TIMEOUT = float(os.getenv("TRACKER_CLIENT_TIMEOUT", "5"))

# Broadcast Configuration
# Interval for heartbeat snapshots in seconds
HEARTBEAT_INTERVAL = float(os.getenv("HEARTBEAT_INTERVAL", "10"))

# Maximum number of undelivered snapshots buffered per observer.
# An observer that falls this far behind is dropped.
SUBSCRIBER_QUEUE_SIZE = int(os.getenv("SUBSCRIBER_QUEUE_SIZE", "64"))

# Logging Configuration
LOG_LEVEL = os.getenv("TRACKER_LOG_LEVEL", "INFO")
LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s %(message)s"

_configured = False


def configure_logging(level: str = LOG_LEVEL) -> None:
    """
    Attach a stdout handler to the root logger once.
    """
    global _configured
    root = logging.getLogger()
    root.setLevel(level.upper())
    if _configured:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    _configured = True
