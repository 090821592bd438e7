"""View-state core: filter builder, tree model, data inspector, navigation."""

from .filters import FilterBuilder, FilterCondition, OperatorKind, Predicate
from .tree import TreeModel, TreeNode

__all__ = [
    "FilterBuilder",
    "FilterCondition",
    "OperatorKind",
    "Predicate",
    "TreeModel",
    "TreeNode",
]
