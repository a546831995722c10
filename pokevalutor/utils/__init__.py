from pokevalutor.utils.constants import (
    CACHE_PATH,
    CACHE_PREFIX,
    CARD_TTL_SECONDS,
    DEFAULT_API_URL,
    LANG,
    MAX_CACHE_ENTRIES,
    PAGE_SIZE,
    REQUEST_TIMEOUT_SECONDS,
    SEARCH_TTL_SECONDS,
    USER_AGENT,
)
from pokevalutor.utils.utils import (
    format_price,
    format_price_list,
    get_api_base,
    pluralize,
)
