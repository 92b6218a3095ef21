"""Request descriptors handed to the transport layer."""

import requests
from pydantic import BaseModel


class RequestDescriptor(BaseModel):
    """One concrete HTTP call planned for a query item."""

    url: str
    resource: str | None = None
    query_params: dict | None = None  # None when the URL was forced
    headers: dict[str, str] = {}
    timeout: int | None = None  # milliseconds
    metadata: dict = {}

    def to_request(self, method: str = "GET") -> requests.Request:
        """Build an unsent ``requests.Request`` for this descriptor."""
        return requests.Request(
            method=method,
            url=self.url,
            params=self.query_params or {},
            headers=self.headers,
        )
