"""
Backend services for the SFCC Metadata Explorer.

Three-pipeline architecture:
- Resolver: catalog calls to request descriptors
- Materializer: lazy expansion of the metadata tree
- Serializer: attribute metadata to import/export XML
"""

from sfcc_metadata.services.materializer import TreeMaterializer
from sfcc_metadata.services.resolver import CallResolver
from sfcc_metadata.services.serializer import ExportSerializer

__all__ = ["CallResolver", "TreeMaterializer", "ExportSerializer"]
