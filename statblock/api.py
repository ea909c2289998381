"""Resolve monster names or links against the SW2.5 monster API."""

import re
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import quote, urlparse

import requests

from .env import DEFAULT_API_BASE, DEFAULT_TIMEOUT
from .errors import FetchFailed, NotFound
from .logger import get_logger

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

Selector = Callable[[List[Dict[str, Any]]], int]


def _get_json(url: str, failure: str, timeout: float) -> Any:
    """Fetch a JSON document, mapping any request failure onto FetchFailed.

    Args:
        url: The URL to fetch
        failure: User-facing message used for the raised FetchFailed
        timeout: Request timeout in seconds

    Raises:
        FetchFailed: On any HTTP error, timeout, request failure or bad JSON
    """
    logger = get_logger()
    logger.record_api_call()
    try:
        resp = requests.get(url, timeout=timeout)
        resp.raise_for_status()
    except requests.exceptions.HTTPError as e:
        status = e.response.status_code if e.response is not None else "HTTPError"
        logger.record_lookup_failure(f"HTTPError_{status}")
        logger.error("Monster API request failed", url=url, status=status)
        raise FetchFailed(failure)
    except requests.exceptions.Timeout:
        logger.record_lookup_failure("Timeout")
        logger.warning("Monster API request timed out", url=url)
        raise FetchFailed(f"{failure} (request timed out)")
    except requests.exceptions.RequestException as e:
        logger.record_lookup_failure("RequestException")
        logger.error("Monster API request error", url=url, error=str(e))
        raise FetchFailed(f"{failure}: {e}")

    try:
        return resp.json()
    except ValueError as e:
        logger.record_lookup_failure("InvalidJSON")
        logger.error("Monster API returned invalid JSON", url=url, error=str(e))
        raise FetchFailed(f"{failure} (invalid JSON response)")


def is_direct_reference(query: str, api_base: str = DEFAULT_API_BASE) -> bool:
    """True when the query is a link to the API rather than a monster name."""
    host = urlparse(api_base).netloc
    return bool(host) and host in query


def monster_url(monster_id: Any, api_base: str = DEFAULT_API_BASE) -> str:
    return f"{api_base}/get/{monster_id}"


def search_monsters(
    name: str,
    api_base: str = DEFAULT_API_BASE,
    timeout: float = DEFAULT_TIMEOUT,
) -> List[Dict[str, Any]]:
    """Return the candidate list for a name search, in API order."""
    url = f"{api_base}/list?name={quote(name, safe='')}"
    data = _get_json(url, "Failed to search for monster name", timeout)
    candidates = data.get("monsters") if isinstance(data, dict) else None
    get_logger().debug("Monster search finished", name=name, matches=len(candidates or []))
    return list(candidates or [])


def prompt_for_selection(
    candidates: List[Dict[str, Any]],
    input_fn: Callable[[str], str] = input,
    output: Callable[[str], None] = print,
) -> int:
    """
    List the candidates and ask for a 1-based choice until a valid one is given.

    Returns:
        The selected 1-based index
    """
    output("Multiple monsters found with that name:")
    for index, monster in enumerate(candidates, start=1):
        output(f"{index}. {monster.get('monstername')}")

    count = len(candidates)
    while True:
        answer = input_fn(f"Select a monster by typing the corresponding number (1-{count}): ")
        # Leading integer wins, so "2." or "2 please" select 2
        match = _LEADING_INT.match(answer)
        selection = int(match.group(1)) if match else 0
        if 1 <= selection <= count:
            return selection
        output("Invalid selection. Please select a number within the range.")


def resolve_monster_url(
    query: str,
    select: Selector = prompt_for_selection,
    api_base: str = DEFAULT_API_BASE,
    timeout: float = DEFAULT_TIMEOUT,
) -> str:
    """
    Turn a link or a free-text name into the URL of a single monster record.

    Raises:
        NotFound: If the name search returns no candidates
        FetchFailed: If the search request fails
    """
    query = query.strip()
    if is_direct_reference(query, api_base):
        return query

    candidates = search_monsters(query, api_base=api_base, timeout=timeout)
    if not candidates:
        raise NotFound("No monsters found with that name")
    if len(candidates) == 1:
        chosen = candidates[0]
    else:
        index = select(candidates)
        if not 1 <= index <= len(candidates):
            raise ValueError(f"Selection out of range: {index}")
        chosen = candidates[index - 1]
    return monster_url(chosen.get("monster_id"), api_base)


def fetch_monster(url: str, timeout: float = DEFAULT_TIMEOUT) -> Optional[Dict[str, Any]]:
    """Fetch one monster record. Returns None when the response has no monster."""
    data = _get_json(url, "Failed to fetch data from the API", timeout)
    return data.get("monster") if isinstance(data, dict) else None


def resolve_record(
    query: str,
    select: Selector = prompt_for_selection,
    api_base: str = DEFAULT_API_BASE,
    timeout: float = DEFAULT_TIMEOUT,
) -> Optional[Dict[str, Any]]:
    """Resolve a link or name and fetch the resulting monster record."""
    logger = get_logger()
    logger.record_lookup_attempt()
    url = resolve_monster_url(query, select=select, api_base=api_base, timeout=timeout)
    record = fetch_monster(url, timeout=timeout)
    if record is not None:
        logger.record_lookup_success()
    logger.info("Monster record fetched", url=url, found=record is not None)
    return record
