"""
Cookie header helpers.

Lingxi authenticates with a plain ``Cookie`` header. Responses may rotate
individual cookies through ``Set-Cookie``; these helpers fold such headers
back into a single cookie string.
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional, Tuple


def parse_cookie_header(cookie: str) -> Dict[str, str]:
    """
    Parse "a=1; b=2" into an ordered name -> value mapping.

    Pairs without "=" are ignored.
    """
    jar: Dict[str, str] = {}
    for pair in (cookie or "").split(";"):
        name, sep, value = pair.strip().partition("=")
        name = name.strip()
        if sep and name:
            jar[name] = value.strip()
    return jar


def parse_set_cookie(header: str) -> Optional[Tuple[str, str]]:
    """
    Extract the name/value pair of one Set-Cookie header.

    Attributes (Path, Domain, Expires, HttpOnly, ...) are dropped.
    """
    first = (header or "").split(";", 1)[0]
    name, sep, value = first.partition("=")
    name = name.strip()
    if not sep or not name:
        return None
    return name, value.strip()


def serialize_cookies(jar: Dict[str, str]) -> str:
    return "; ".join(f"{name}={value}" for name, value in jar.items())


def merge_cookies(cookie: str, set_cookie_headers: Iterable[str]) -> str:
    """
    Merge Set-Cookie headers into an existing cookie string.

    Names already present keep their position; a newly observed value for
    the same name replaces the old one. New names are appended. Merging the
    same headers twice gives the same result as merging them once.

    Args:
        cookie: Current cookie string
        set_cookie_headers: Raw Set-Cookie header values

    Returns:
        The merged cookie string
    """
    jar = parse_cookie_header(cookie)
    for header in set_cookie_headers:
        parsed = parse_set_cookie(header)
        if parsed is None:
            continue
        name, value = parsed
        jar[name] = value
    return serialize_cookies(jar)
