import os
from dotenv import load_dotenv

load_dotenv()

# Master switch for diagnostics; CRI_LOG_MODE wins when both are set
DEBUG = os.getenv("CRI_DEBUG", "false").lower() == "true"

# --- Instrumentation / diagnostics ---
LOG_MODE = os.getenv("CRI_LOG_MODE", "debug" if DEBUG else "live").lower()  # live | debug | trace
INCLUDE_LOG_CTX: bool = True
# How many diagnostic records the sink keeps around for inspection
DIAG_HISTORY_LIMIT = int(os.getenv("CRI_DIAG_HISTORY_LIMIT", "200"))

# Optional log file, truncated each run. Empty means console only.
LOG_FILE = os.getenv("CRI_LOG_FILE", "")

# --- Section definitions ---
# File or directory the CLI loads section definitions from when --sections is not given
SECTIONS_PATH = os.getenv("CRI_SECTIONS_PATH")
SECTION_FILE_PATTERNS = ("*.yml", "*.yaml", "*.json")

# --- Sizes filter ---
DEFAULT_FILTER_PRIORITY = 10
