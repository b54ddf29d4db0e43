"""Unit tests for core domain logic.

These tests exercise request construction, conversion and date math
without a network. The transport is replaced with FakeHttpClient.
"""
