from dataclasses import dataclass

POLL_INTERVAL_SECONDS: int = 30
REQUEST_TIMEOUT_SECONDS: int = 10
CONNECTION_POOL_LIMIT: int = 20

# Twitch has no public unauthenticated endpoint. This is the client id the
# twitch.tv website itself sends; it has been stable for years.
TWITCH_GQL_URL: str = "https://gql.twitch.tv/gql"
TWITCH_CLIENT_ID: str = "kimne78kx3ncx6brgo4mv6wki5h1ko"
TWITCH_DISCOVERY_PAGE_SIZE: int = 30

KICK_CHANNELS_URL: str = "https://kick.com/api/v2/channels"
KICK_FEATURED_URL: str = "https://kick.com/stream/featured-livestreams"
MAX_KICK_PAGES: int = 3

SUGGESTIONS_LIMIT: int = 8
MIN_LANGUAGE_MATCHES: int = 4  # below this the language filter is dropped

MAX_RECENTS: int = 8
MAX_FAVORITES: int = 30

# native client: Kick sits behind Cloudflare, which rejects library user agents
NATIVE_HTTP_ENV: str = "LIVE_STATUS_NATIVE_HTTP"
BROWSER_USER_AGENT: str = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
)
LIBRARY_USER_AGENT: str = "LiveStatus/1.0 (live-status-engine)"

DEFAULT_LOCALE: str = "en"

# app locale -> how each platform spells that language
SUPPORTED_LANGUAGES: dict[str, dict[str, str]] = {
    "en": {"twitch": "EN", "kick_code": "en", "kick_name": "English"},
    "pt": {"twitch": "PT", "kick_code": "pt", "kick_name": "Portuguese"},
    "es": {"twitch": "ES", "kick_code": "es", "kick_name": "Spanish"},
    "de": {"twitch": "DE", "kick_code": "de", "kick_name": "German"},
    "cn": {"twitch": "ZH", "kick_code": "zh", "kick_name": "Chinese"},
    "ru": {"twitch": "RU", "kick_code": "ru", "kick_name": "Russian"},
}

# channels main.py tracks on startup
TRACKED_CHANNELS: list[dict[str, str]] = [
    {"channel": "shroud", "platform": "twitch"},
    {"channel": "xqc", "platform": "kick"},
    # {"channel": "gaules", "platform": "twitch"},
]


def language_codes(locale: str) -> dict[str, str]:
    """Platform language codes for an app locale, falling back to DEFAULT_LOCALE."""
    return SUPPORTED_LANGUAGES.get((locale or "").lower(), SUPPORTED_LANGUAGES[DEFAULT_LOCALE])


@dataclass(frozen=True)
class EngineSettings:
    """Per-service tunables. Defaults mirror the module constants."""
    poll_interval: float = POLL_INTERVAL_SECONDS
    max_kick_pages: int = MAX_KICK_PAGES
    suggestions_limit: int = SUGGESTIONS_LIMIT
    min_language_matches: int = MIN_LANGUAGE_MATCHES
    twitch_page_size: int = TWITCH_DISCOVERY_PAGE_SIZE
