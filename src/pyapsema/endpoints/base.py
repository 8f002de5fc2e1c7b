"""Base class for endpoint clients."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pyapsema.client import ApsemaClient


class BaseEndpoint:
    """Base class for endpoint groups.

    Endpoint groups never own HTTP state; the cookie jar and response cache
    belong to the client passed in.
    """

    def __init__(self, client: ApsemaClient) -> None:
        """Initialize the endpoint group.

        Args:
            client: The client whose transport, cookies and cache are used
        """
        self.client = client
