"""Command line interface for structwire."""
