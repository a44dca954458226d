"""Kima — application toolkit with a Solr search layer and pluggable caches."""

__version__ = "0.1.0"
