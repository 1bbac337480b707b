"""snapcheck command-line interface."""
