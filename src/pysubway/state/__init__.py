"""State/store layer.

This package is the single source of truth for how results of the
independently polled data sources are committed into the dashboard's
view model, and how late or stale results are rejected.
"""
