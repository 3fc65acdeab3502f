"""Command line interface for the GoTrue client."""
