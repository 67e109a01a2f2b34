"""
Search client and view state for the MOC Finder frontend.

Calls the local proxy (never Rebrickable directly, so the API key stays on
the server) and folds the outcome into a SearchState the UI renders.

Public API:
    SearchState                      idle | loading | error | success
    fetch_alternates(set_num)      → SearchResponse   (raises SearchError)
    submit(raw_input)              → SearchState
"""

import logging
import os
from dataclasses import dataclass
from typing import Literal

import requests
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from rebrickable.alternates import normalize_set_num

load_dotenv()

API_URL = os.getenv("MOC_FINDER_API_URL", "http://localhost:8000/api/rebrickable-proxy")
TIMEOUT = 30

MSG_EMPTY_INPUT   = "Please enter a LEGO set number."
MSG_UNKNOWN_ERROR = "An unknown error occurred."
MSG_BAD_RESPONSE  = "Unexpected response from the server."

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

class AlternateBuildResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    set_num: str
    name: str
    year: int | None = None
    num_parts: int = Field(ge=0)
    moc_img_url: str | None = None
    moc_url: str
    designer_name: str
    designer_url: str


class SearchResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    count: int = Field(ge=0)
    next: str | None = None
    previous: str | None = None
    results: list[AlternateBuildResult] = []


class SearchError(Exception):
    """A failed search; str(exc) is the message shown to the user."""


@dataclass(frozen=True)
class SearchState:
    status: Literal["idle", "loading", "error", "success"] = "idle"
    query: str = ""
    response: SearchResponse | None = None
    error: str | None = None


IDLE = SearchState()


# ---------------------------------------------------------------------------
# Proxy call
# ---------------------------------------------------------------------------

def _error_message(resp: requests.Response) -> str:
    """Prefer the proxy's {"error": ...} field, else a status-code fallback."""
    fallback = f"HTTP error! Status: {resp.status_code}"
    try:
        body = resp.json()
    except ValueError:
        return fallback
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return fallback


def fetch_alternates(set_num: str, api_url: str = API_URL) -> SearchResponse:
    try:
        resp = requests.get(api_url, params={"set_num": set_num}, timeout=TIMEOUT)
    except requests.RequestException as exc:
        raise SearchError(str(exc) or MSG_UNKNOWN_ERROR) from exc

    if not resp.ok:
        raise SearchError(_error_message(resp))

    try:
        return SearchResponse.model_validate(resp.json())
    except (ValueError, ValidationError) as exc:
        # Full validation detail goes to the log, not the page
        log.error("Malformed proxy response for %r: %s", set_num, exc)
        raise SearchError(MSG_BAD_RESPONSE) from exc


# ---------------------------------------------------------------------------
# State transitions
# ---------------------------------------------------------------------------

def start(raw_input: str) -> SearchState:
    """
    idle/any → loading, or → error when the trimmed input is empty.

    The query is kept in the same normalised form the proxy looks up
    ("10305" → "10305-1"), so the results heading names the set that was
    actually searched.
    """
    if not raw_input.strip():
        return SearchState(status="error", error=MSG_EMPTY_INPUT)
    return SearchState(status="loading", query=normalize_set_num(raw_input))


def resolve(state: SearchState, api_url: str = API_URL) -> SearchState:
    """loading → success | error. Any other state is returned unchanged."""
    if state.status != "loading":
        return state
    try:
        response = fetch_alternates(state.query, api_url=api_url)
    except SearchError as exc:
        log.error("Search error for %r: %s", state.query, exc)
        return SearchState(status="error", query=state.query, error=str(exc) or MSG_UNKNOWN_ERROR)
    return SearchState(status="success", query=state.query, response=response)


def submit(raw_input: str, api_url: str = API_URL) -> SearchState:
    return resolve(start(raw_input), api_url=api_url)


def results_heading(state: SearchState) -> str:
    """Set number shown above the results: first result's, else the normalised query."""
    if state.response and state.response.results:
        return state.response.results[0].set_num
    return state.query
