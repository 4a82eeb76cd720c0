"""Source scanning, expansion pipeline and command line."""
