"""
Shared utilities for talking to external services.

- http.py - pre-configured ``requests.Session`` (timeout, User-Agent, single attempt)
"""
