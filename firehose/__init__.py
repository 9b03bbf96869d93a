"""Firehose - CNCF release feed aggregator."""

__version__ = "1.0.0"
