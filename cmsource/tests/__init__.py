"""Test suite for the Cloudera Manager data source.

Organized into three categories:

1. core/: Unit tests for core domain logic
   - Minimal dependencies, fast execution
   - Uses in-memory fakes for ports

2. adapters/: Tests for adapter implementations
   - httpx transport against httpx.MockTransport
   - CLI commands against fake transports

3. fakes/: Port implementations for testing
   - In-memory implementation of HttpClientPort
"""
