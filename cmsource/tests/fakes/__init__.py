"""Fake implementations of core ports for testing.

- FakeHttpClient: Canned responses and recorded requests
"""

from .http import FakeHttpClient

__all__ = ["FakeHttpClient"]
