"""Internet Archive Wayback Machine provider package.

Lists captures through the public CDX server. No credentials are required.
The Internet Archive throttles aggressive clients with 429 and 503
responses; both are retried.
"""
