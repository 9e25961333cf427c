"""Command line interface for bedarrange."""
