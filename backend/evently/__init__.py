"""
Evently data layer: event and booking records, their normalization
pipelines, and a cached database connection helper.
"""

__version__ = "1.0.0"
