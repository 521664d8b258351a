"""Sparse document-term features."""

from .sparse import SparseMatrix, build_labels, build_sparse_matrix

__all__ = ["SparseMatrix", "build_labels", "build_sparse_matrix"]
