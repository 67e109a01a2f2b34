"""
Rebrickable alternate-builds lookup.

Wraps the single upstream call the proxy makes:
    GET https://rebrickable.com/api/v3/lego/sets/<set_num>/alternates/

The credential travels in the Authorization header ("key <api_key>"), and a
fixed page_size large enough to return every alternate in one page is sent.
The `next` link in the response is never followed.

Public API:
    normalize_set_num(raw) → str
    fetch_alternates(set_num, api_key, session) → requests.Response
"""

import logging
from urllib.parse import quote

import requests

BASE_URL  = "https://rebrickable.com/api/v3/lego"
PAGE_SIZE = 1000

log = logging.getLogger(__name__)

SESSION = requests.Session()
SESSION.headers["User-Agent"] = "MOC-Finder/1.0"
SESSION.headers["Accept"] = "application/json"


# ---------------------------------------------------------------------------
# Set numbers
# ---------------------------------------------------------------------------

def normalize_set_num(raw: str) -> str:
    """
    Normalise a user-entered set number to Rebrickable's key format.

    Official sets are keyed with a variant suffix, so "10305" becomes
    "10305-1". Entries already carrying a "-<n>" suffix (or anything that is
    not purely numeric, e.g. "MOC-1234") are only trimmed.
    """
    set_num = raw.strip()
    if set_num.isdigit():
        return f"{set_num}-1"
    return set_num


def alternates_url(set_num: str) -> str:
    return f"{BASE_URL}/sets/{quote(set_num, safe='')}/alternates/"


# ---------------------------------------------------------------------------
# Upstream call
# ---------------------------------------------------------------------------

def fetch_alternates(
    set_num: str,
    api_key: str,
    session: requests.Session | None = None,
) -> requests.Response:
    """
    Issue the alternates request and return the raw response.

    Status handling is left to the caller; transport failures propagate as
    requests.RequestException.
    """
    session = session or SESSION
    url = alternates_url(set_num)
    log.info("GET %s  page_size=%d", url, PAGE_SIZE)
    return session.get(
        url,
        params={"page_size": PAGE_SIZE},
        headers={"Authorization": f"key {api_key}"},
    )
