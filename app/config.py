# app/config.py
import os
from typing import Dict, List

from dotenv import load_dotenv

load_dotenv()

# --- DATABASE CONFIGURATION ---
MONGO_URI: str = os.getenv("MONGO_URI", "mongodb://localhost:27017/")
#MONGO_URI: str = "mongodb://db:27017/" # for docker containers
MONGO_DB_NAME: str = os.getenv("MONGO_DB_NAME", "manga_catalog")

# --- SERVER ---
PORT: int = int(os.getenv("PORT", "5000"))
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS: List[str] = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",")]

# --- CATALOG ---
ITEM_TABLE: str = "manga"
ITEM_FOREIGN_KEY: str = "manga_id"
LISTING_LIMIT: int = 1000
ARTIST_SORT_KEY: str = "Artist"
# Empty string means "take LC_COLLATE from the process environment".
SORT_LOCALE: str = os.getenv("SORT_LOCALE", "")

# --- IMAGE PROXY ---
DEFAULT_TIMEOUT: float = float(os.getenv("DEFAULT_TIMEOUT", "30"))
DEFAULT_IMAGE_CONTENT_TYPE: str = "image/jpeg"

# Upstream image hosts reject requests that do not look like a browser.
PROXY_HEADERS: Dict[str, str] = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:138.0) Gecko/20100101 Firefox/138.0",
    "Accept": "*/*",
    "Accept-Encoding": "gzip, deflate, br, zstd",
    "Accept-Language": "en-US,en;q=0.5",
    "DNT": "1",
    "Referer": os.getenv("PROXY_REFERER", "https://hitomi.la/"),
    "Upgrade-Insecure-Requests": "1",
}

# Headers copied from the upstream image response onto ours.
RELAYED_HEADERS = ("content-length", "content-encoding")
