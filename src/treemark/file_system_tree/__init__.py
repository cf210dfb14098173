"""Selection tree representation built from a directory.

This module provides the immutable tree node type, the filesystem capability the
builder reads through, and the builder that walks a directory while applying
nested ignore-rule files.
"""
