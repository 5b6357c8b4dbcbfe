from __future__ import annotations
import os

# Service mode: "sim" for the built in reading generator or "real" for the upstream sensor service
MODE = os.getenv("SVC_MODE", "sim").lower()

# Upstream sensor service that returns the latest raw reading as JSON
SENSOR_UPSTREAM_URL = os.getenv("SENSOR_UPSTREAM_URL", "http://localhost:3001/api/data")

# Seconds between acquisition cycles (the first cycle runs immediately on start)
POLL_INTERVAL_SECONDS = float(os.getenv("SVC_POLL_INTERVAL_SECONDS", "62"))

# Number of chart points kept in the sliding window
WINDOW_CAPACITY = int(os.getenv("SVC_WINDOW_CAPACITY", "20"))

# Timeout for a single upstream request
REQUEST_TIMEOUT_SECONDS = float(os.getenv("SVC_REQUEST_TIMEOUT_SECONDS", "10"))

# Optional seed so simulated readings are reproducible
_sim_seed = os.getenv("SVC_SIM_SEED", "")
SIM_SEED = int(_sim_seed) if _sim_seed else None

LOG_LEVEL = os.getenv("SVC_LOG_LEVEL", "INFO").upper()
