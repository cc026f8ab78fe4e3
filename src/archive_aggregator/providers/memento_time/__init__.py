"""Memento Time Travel provider package.

Time Travel aggregates mementos from many public web archives behind one
JSON timemap, so a single query covers archives without a provider of
their own.
"""
