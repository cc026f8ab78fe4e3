"""Perma.cc provider package.

Perma.cc is a citation archive run by the Harvard Law School Library. Its
API requires a key, passed as the ``api_key`` option or through the
``ARCHIVE_AGGREGATOR_PERMACC_API_KEY`` setting.
"""
