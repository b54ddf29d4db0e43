"""Cloudera Manager data source for metrics dashboards."""

__version__ = "0.1.0"
