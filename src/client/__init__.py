"""Client layer: /fs API wrapper (httpx)."""

from .api_client import ApiClient, DirectoryListing

__all__ = ["ApiClient", "DirectoryListing"]
