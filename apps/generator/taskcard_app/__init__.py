"""Command line generator that renders every configured task to PNG."""
