"""
Access to the planning API: the HTTP client, its error taxonomy and the
per-endpoint services built on it.
"""
