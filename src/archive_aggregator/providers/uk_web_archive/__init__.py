"""UK Web Archive provider package.

The British Library's UK Web Archive runs a CDX server compatible with the
Wayback Machine's, so this provider shares the CDX mapping helpers.
"""
