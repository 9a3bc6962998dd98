"""
Helpers for building tree nodes.
"""

from typing import Any

from sfcc_metadata.schemas.tree import Informational, NodeVariant, TreeNode


def format_value(value: Any) -> str:
    """Render a scalar document value for display."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def leaf_node(parent: TreeNode, key: str, label: str, generation: int) -> TreeNode:
    return TreeNode(
        key=key,
        label=label,
        variant=NodeVariant.LEAF,
        parent_path=parent.path,
        generation=generation,
    )


def message_node(
    parent: TreeNode,
    message: str,
    generation: int,
    failed: bool = False,
) -> TreeNode:
    """Build a non-expandable node that only carries a message."""
    return TreeNode(
        key="message",
        label=message,
        variant=NodeVariant.LEAF,
        parent_path=parent.path,
        payload=Informational(message=message, failed=failed),
        generation=generation,
    )
