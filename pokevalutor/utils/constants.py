import os
from pathlib import Path

from dotenv import load_dotenv


load_dotenv()

_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

# Deployed worker in front of the Scrydex API, used when PV_API_URL is unset.
DEFAULT_API_URL = "https://pokevalutor-v1.lreyperez18.workers.dev"
API_URL = os.environ.get("PV_API_URL", "")

LANG = os.environ.get("PV_LANG", "en")
PAGE_SIZE = 5
REQUEST_TIMEOUT_SECONDS = float(os.environ.get("PV_REQUEST_TIMEOUT", "10"))
USER_AGENT = "PokeValutor/1.0"

CACHE_PATH = Path(os.environ.get("PV_CACHE_PATH", _PROJECT_ROOT / "db" / "cache.db"))
CACHE_PREFIX = "pv:scrydex:"
SEARCH_TTL_SECONDS = 12 * 60 * 60
CARD_TTL_SECONDS = 24 * 60 * 60
MAX_CACHE_ENTRIES = 250

LOG_LEVEL = os.environ.get("PV_LOG_LEVEL", "WARNING")
