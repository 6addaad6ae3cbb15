"""Tunable constants for the attribution pipeline.

Strategy confidences, cascade thresholds, automation timings, the SauceNAO
endpoint and timeout, the user agent, the settings path and the HTML dump flag
can be overridden through the environment (`WMT_*`). Engine score tiers,
result caps, poll interval, settle buffers and SauceNAO result limits are
fixed. The confidence numbers are empirically tuned; only their relative
ordering matters.
"""

from __future__ import annotations

import os

# ============================
# Strategy confidence
# ============================
PLATFORM_CONFIDENCE = int(os.getenv("WMT_PLATFORM_CONFIDENCE", "97"))
CONTEXT_CONFIDENCE = int(os.getenv("WMT_CONTEXT_CONFIDENCE", "72"))

# A remote strategy runs only while the best confidence so far is below its threshold.
LENS_THRESHOLD = int(os.getenv("WMT_LENS_THRESHOLD", "85"))
YANDEX_THRESHOLD = int(os.getenv("WMT_YANDEX_THRESHOLD", "70"))
SAUCENAO_THRESHOLD = int(os.getenv("WMT_SAUCENAO_THRESHOLD", "60"))

# Lens tiers: author on artist host > author on reference host > author elsewhere
LENS_ARTIST_AUTHOR = 82
LENS_REFERENCE_AUTHOR = 78
LENS_OTHER_AUTHOR = 65
LENS_REFERENCE_NO_AUTHOR = 60
LENS_OTHER_NO_AUTHOR = 50

YANDEX_ENTITY = 70
YANDEX_AUTHOR = 68
YANDEX_NO_AUTHOR = 52

# ============================
# Result shaping
# ============================
MAX_RESULTS = 8
LENS_MAX_RESULTS = 6
YANDEX_MAX_RESULTS = 5
DEDUPE_KEY_CHARS = 80
TITLE_CHARS = 80

# ============================
# Automation timing (seconds)
# ============================
LENS_SETTLE_SECONDS = float(os.getenv("WMT_LENS_SETTLE_SECONDS", "2.5"))
LENS_TOTAL_SECONDS = float(os.getenv("WMT_LENS_TOTAL_SECONDS", "25"))
YANDEX_SETTLE_SECONDS = float(os.getenv("WMT_YANDEX_SETTLE_SECONDS", "2"))
YANDEX_TOTAL_SECONDS = float(os.getenv("WMT_YANDEX_TOTAL_SECONDS", "20"))
PARSER_POLL_SECONDS = float(os.getenv("WMT_PARSER_POLL_SECONDS", "8"))
PARSER_POLL_INTERVAL_SECONDS = 0.25
# browser launch happens inside the first automated strategy's time budget
BROWSER_LAUNCH_SECONDS = float(os.getenv("WMT_BROWSER_LAUNCH_SECONDS", "30"))
LENS_SETTLE_BUFFER_SECONDS = 1.5
YANDEX_SETTLE_BUFFER_SECONDS = 0.8
LENS_MIN_OFFSITE_LINKS = 4

# ============================
# Remote search API
# ============================
SAUCENAO_ENDPOINT = os.getenv("WMT_SAUCENAO_ENDPOINT", "https://saucenao.com/search.php")
SAUCENAO_NUMRES = 8
SAUCENAO_MIN_SIMILARITY = 50.0
SAUCENAO_TIMEOUT_SECONDS = float(os.getenv("WMT_SAUCENAO_TIMEOUT_SECONDS", "20"))

DEFAULT_USER_AGENT = os.getenv(
    "WMT_USER_AGENT",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/128.0 Safari/537.36",
)
DEFAULT_SETTINGS_PATH = os.getenv(
    "WMT_SETTINGS_PATH",
    os.path.join(os.path.expanduser("~"), ".config", "wmt-scraper", "settings.json"),
)
DEBUG_HTML = os.getenv("WMT_DEBUG_HTML", "") not in ("", "0", "false")
