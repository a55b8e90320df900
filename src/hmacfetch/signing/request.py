"""Request representation used for signing and verification."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from multidict import CIMultiDict
from starlette.requests import Request
from yarl import URL


@dataclass
class SignableRequest:
    """
    The parts of an HTTP request that take part in signing.

    The body is held as immutable bytes, so canonicalization can read it any
    number of times without affecting later transmission.
    """

    method: str
    url: str
    headers: CIMultiDict[str] = field(default_factory=CIMultiDict)
    body: bytes | None = None

    def __post_init__(self) -> None:
        self.method = self.method.upper()
        if not isinstance(self.headers, CIMultiDict):
            self.headers = CIMultiDict(self.headers)
        if self.body is not None:
            self.body = bytes(self.body)

    @classmethod
    def build(
        cls,
        method: str,
        url: str,
        headers: Mapping[str, str] | None = None,
        body: bytes | None = None,
    ) -> SignableRequest:
        """Create a request from plain values."""
        return cls(method=method, url=url, headers=CIMultiDict(headers or {}), body=body)

    def clone(self) -> SignableRequest:
        """Return an independent copy with its own header bag."""
        return SignableRequest(
            method=self.method,
            url=self.url,
            headers=self.headers.copy(),
            body=self.body,
        )

    @classmethod
    async def from_starlette(cls, request: Request) -> SignableRequest:
        """
        Snapshot an inbound starlette request.

        Starlette caches the body on the request object, so the application
        can still read it after this call. The URL path is taken as it was
        sent (still percent-encoded) when the server provides it.
        """
        url = request.url
        raw_path = request.scope.get("raw_path")
        if raw_path:
            url = url.replace(path=raw_path.decode("latin-1"))

        body = await request.body()
        return cls(
            method=request.method,
            url=str(url),
            headers=CIMultiDict(request.headers.items()),
            body=body,
        )


def normalize_url(url: str | URL) -> URL:
    """
    Put a URL into the form the server reconstructs it in.

    The fragment is never transmitted and an empty path goes out as "/".
    """
    url = URL(url).with_fragment(None)
    if url.is_absolute() and url.raw_path == "/" and not str(url.with_query(None)).endswith("/"):
        query = url.raw_query_string
        url = url.with_path("/")
        if query:
            url = URL(f"{url}?{query}", encoded=True)
    return url
