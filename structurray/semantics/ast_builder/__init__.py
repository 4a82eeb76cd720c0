"""
AST Builder module for structurray.

Exports:
    ASTBuilder: Builds StructSkeleton nodes from Lark parse trees
    parse_skeleton: Parse and build a declaration in one step
"""
from structurray.semantics.ast_builder.builder import ASTBuilder, parse_skeleton

__all__ = [
    'ASTBuilder',
    'parse_skeleton',
]
