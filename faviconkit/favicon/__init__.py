"""Favicon discovery, selection, retrieval and transformation components"""

from faviconkit.favicon.discovery import FaviconDiscovery
from faviconkit.favicon.favicon import Favicon, fetch_favicon, find_candidates
from faviconkit.favicon.favicon_fetcher import FaviconFetcher
from faviconkit.favicon.favicon_selector import CandidateSelector
from faviconkit.favicon.transformer import FaviconTransformer, ImageCodec, PillowCodec, Raster

__all__ = [
    "CandidateSelector",
    "Favicon",
    "FaviconDiscovery",
    "FaviconFetcher",
    "FaviconTransformer",
    "ImageCodec",
    "PillowCodec",
    "Raster",
    "fetch_favicon",
    "find_candidates",
]
