"""
Utility modules for the SFCC Metadata Explorer.
"""

from sfcc_metadata.utils.endpoint_catalog import CATALOG, get_call_config
from sfcc_metadata.utils.tree_helpers import format_value

__all__ = ["CATALOG", "get_call_config", "format_value"]
