"""Archive.today provider package.

Archive.today (also served as archive.is, archive.ph and archive.md) has no
search API; captures are listed through its Memento timemap.
"""
