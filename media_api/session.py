"""HTTP session factory for the media API client."""

import requests

from .config import USER_AGENT, VERIFY_SSL


def build_session(verify_ssl: bool = VERIFY_SSL) -> requests.Session:
    """
    Return a requests.Session shared by every request a transport sends.

    Nothing is retried: a failed call is reported once and the caller
    decides what to do.  Callers that need an ``Authorization`` header
    set it on the returned session.
    """
    session = requests.Session()
    session.verify = verify_ssl
    session.headers.update({
        "User-Agent": USER_AGENT,
        "Accept": "application/json",
    })
    return session
