"""Command-line interface adapters.

Provides operator commands against a configured data source:
- test: Check the connection and report the API version
- query: Run tsquery expressions and print dashboard-shaped series
"""
