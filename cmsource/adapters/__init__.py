"""External adapters for the Cloudera Manager data source.

This package contains all external dependencies (httpx, the command line)
and provides implementations of the core port interfaces.

Adapter Organization:

- http/: HttpClientPort implementations (httpx)
- cli/: Command-line operator commands
"""
