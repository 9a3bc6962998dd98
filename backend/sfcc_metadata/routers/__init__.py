"""
FastAPI routers for the SFCC Metadata Explorer.
"""

from sfcc_metadata.routers import export, metadata, tree

__all__ = ["tree", "export", "metadata"]
