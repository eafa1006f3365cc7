"""Static crawler — site search and raw-markup embed scanning."""

from embedscout.crawler.runner import PageEmbeds, crawl
from embedscout.crawler.fetcher import fetch_html
from embedscout.crawler.markup import StaticEmbed, extract_search_links, scan_markup

__all__ = ["crawl", "fetch_html", "scan_markup", "extract_search_links", "PageEmbeds", "StaticEmbed"]
