# app/core/cookie_storage.py
from typing import Iterator, MutableMapping
from urllib.parse import quote, unquote

from fastapi import Request, Response

# one year; wishlist/compare survive browser restarts like localStorage
COOKIE_MAX_AGE = 60 * 60 * 24 * 365


class CookieStorage(MutableMapping[str, str]):
    """
    String key/value store over the request/response cookies.

    Values are percent-encoded so JSON payloads survive cookie quoting.
    Writes go to the response and are also visible to later reads in the
    same request.
    """

    def __init__(self, request: Request, response: Response):
        self.request = request
        self.response = response
        self._written: dict[str, str | None] = {}

    def __getitem__(self, key: str) -> str:
        if key in self._written:
            value = self._written[key]
            if value is None:
                raise KeyError(key)
            return value
        return unquote(self.request.cookies[key])

    def __setitem__(self, key: str, value: str) -> None:
        self._written[key] = value
        self.response.set_cookie(
            key,
            quote(value, safe=""),
            max_age=COOKIE_MAX_AGE,
            samesite="lax",
        )

    def __delitem__(self, key: str) -> None:
        if key not in self:
            raise KeyError(key)
        self._written[key] = None
        self.response.delete_cookie(key)

    def _keys(self) -> list[str]:
        keys = [k for k in self.request.cookies if k not in self._written]
        keys += [k for k, v in self._written.items() if v is not None]
        return keys

    def __iter__(self) -> Iterator[str]:
        return iter(self._keys())

    def __len__(self) -> int:
        return len(self._keys())
