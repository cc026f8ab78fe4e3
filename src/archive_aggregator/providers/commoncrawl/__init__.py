"""Common Crawl provider package.

Queries the Common Crawl URL index (CDX-style, newline-delimited JSON) for
captures of a domain in one crawl collection. The collection defaults to
the most recent crawl, looked up in ``collinfo.json``.
"""
