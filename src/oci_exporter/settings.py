import os

# --- OCI credentials ---
OCI_CONFIG_FILE = os.getenv("OCI_CONFIG_FILE", os.path.expanduser("~/.oci/config"))
OCI_CONFIG_PROFILE = os.getenv("OCI_CONFIG_PROFILE", "DEFAULT")
OCI_AUTH = os.getenv("OCI_AUTH", "config_file")  # "config_file" or "instance_principal"

# --- Catalog files ---
TENANTS_FILE = os.getenv("TENANTS_FILE", "config/tenants.yaml")
METRICS_FILE = os.getenv("METRICS_FILE", "config/metrics.yaml")

# --- Serving ---
LISTEN_ADDRESS = os.getenv("LISTEN_ADDRESS", ":8080")

# --- Collection ---
SWEEP_INTERVAL_SEC = float(os.getenv("SWEEP_INTERVAL_SEC", "60"))
# Must stay above the 1m sampling interval used in every query term
LOOKBACK_MINUTES = int(os.getenv("LOOKBACK_MINUTES", "5"))
# OCI Monitoring allows 10 requests/second per tenancy
MIN_CALL_SPACING_SEC = float(os.getenv("MIN_CALL_SPACING_SEC", "0.1"))
MAX_QUERY_ATTEMPTS = int(os.getenv("MAX_QUERY_ATTEMPTS", "3"))
QUERY_MODE = os.getenv("QUERY_MODE", "grouped")  # "grouped" or "per_metric"
MAX_CONCURRENT_QUERIES = int(os.getenv("MAX_CONCURRENT_QUERIES", "1"))
STALE_SERIES_TTL_SEC = float(os.getenv("STALE_SERIES_TTL_SEC", "0"))  # 0 disables eviction

# --- Logging ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
