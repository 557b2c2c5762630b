from .rest import Gist, parse_listing
from .web import GistClient, fetch_page, iter_pages, open_client

__all__ = [
    "Gist",
    "GistClient",
    "fetch_page",
    "iter_pages",
    "open_client",
    "parse_listing",
]
