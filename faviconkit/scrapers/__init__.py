"""Markup scraping components for favicon discovery"""

from faviconkit.scrapers.markup_parser import MarkupParser, SoupMarkupParser, parse_sizes

__all__ = ["MarkupParser", "SoupMarkupParser", "parse_sizes"]
