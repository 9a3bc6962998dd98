# SFCC Metadata Explorer Backend
"""
SFCC Metadata Explorer Backend

This package exposes a lazily-expanded tree view of the metadata stored on a
Salesforce Commerce Cloud instance (system and custom object definitions,
attribute definitions, attribute groups, site preferences) through the OCAPI
Data API, and exports attribute metadata in the SFCC import/export XML schema.

Architecture:
- Call Resolver: declarative endpoint catalog to concrete request descriptors
- Tree Materializer: per-node-variant expansion into child tree nodes
- Export Serializer: attribute/group documents to metadata XML
"""

__version__ = "1.0.0"
