import requests

from config import BROWSER_HEADERS


def build_session(extra_headers=None) -> requests.Session:
    """requests.Session carrying browser-like headers; upstreams reject bare clients."""
    session = requests.Session()
    session.headers.update(BROWSER_HEADERS)
    if extra_headers:
        session.headers.update(extra_headers)
    return session


def unwrap_list(payload, keys):
    """
    Descend through wrapper keys until a list appears.

    {"data": {"stocks": [...]}} with keys ("data", "stocks") -> [...]
    """
    data = payload
    for key in keys:
        if isinstance(data, dict) and key in data:
            data = data[key]
    return data if isinstance(data, list) else []
