"""WebCite provider package.

WebCite stopped accepting new archiving requests but still serves existing
archives. It has no listing API: a query either resolves to an archived
copy or to a notice page.
"""
