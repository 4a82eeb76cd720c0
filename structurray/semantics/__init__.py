"""AST, argument validation and pseudo-array synthesis."""
