"""
MongoDB repositories.

Every function accepts an optional ``collection`` so callers (and tests) can
supply their own; by default the configured database is used.
"""
