"""Command-line interface for the QuickBooks Query Tool."""
