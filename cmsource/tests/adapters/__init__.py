"""Tests for adapter implementations.

These tests exercise adapters against mocked external systems
to validate translation between core models and HTTP.
"""
