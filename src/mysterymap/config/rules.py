"""Lookup tables: column aliases, default facets, image host rules."""

# Canonical field -> accepted header spellings, tried in order. Headers are
# compared after stripping non-alphanumerics and lowercasing, so "Image URL",
# "image_url" and "imageUrl" all land on the same key.
COLUMN_ALIASES = {
    "id": ["venue_id", "id"],
    "name": ["name", "venue"],
    "type": ["type", "category"],
    "city": ["city"],
    "address": ["address", "location"],
    "price": ["price_avg", "price", "avg price", "price per person", "pp"],
    "vibes": ["vibes", "vibe", "tags"],
    "image": [
        "image", "imageUrl", "image url", "image link", "image_url",
        "img", "photo", "cover",
    ],
    "map": ["map_url", "mapUrl", "map url", "maps link", "google maps"],
}

VIBE_DELIMITERS = "|,/"

DEFAULT_VIBES = [
    "cozy", "indie", "quiet", "vibrant", "romantic", "retro", "artsy",
    "hidden", "minimalist", "aesthetic", "late-night", "views", "casual",
]

DEFAULT_TYPES = ["Cafe", "Bar", "Restaurant"]

# Hosts that refuse to serve images embedded on third-party pages.
HOTLINK_HOSTILE_HOSTS = (
    "instagram.com",
    "cdninstagram.com",
    "fbcdn.net",
    "fbsbx.com",
    "pinimg.com",
    "tripadvisor.com",
    "tacdn.com",
    "yelpcdn.com",
    "lh3.googleusercontent.com",
    "lh5.googleusercontent.com",
)

IMAGE_PROXY_BASE = "https://images.weserv.nl/"
IMAGE_PROXY_HOST = "images.weserv.nl"
IMAGE_PROXY_WIDTH = 800
IMAGE_PROXY_HEIGHT = 500
IMAGE_PROXY_FIT = "cover"

DRIVE_VIEW_URL = "https://drive.google.com/uc?export=view&id={file_id}"
DRIVE_HOSTS = ("drive.google.com", "docs.google.com")

PLACEHOLDER_IMAGE = (
    "data:image/svg+xml;utf8,"
    "<svg xmlns='http://www.w3.org/2000/svg' width='800' height='500'>"
    "<rect width='800' height='500' fill='%231b1e2b'/></svg>"
)

MAPS_SEARCH_URL = "https://www.google.com/maps/search/?api=1&query={query}"

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"

WAITLIST_MAILTO = "mailto:hello@mysterymapp.app?subject={subject}&body={body}"
WAITLIST_MAIL_SUBJECT = "MysteryMapp Waitlist"
