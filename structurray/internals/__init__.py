"""Parser setup, diagnostics and the error catalog."""
