"""Rust source emission for assembled declarations."""
