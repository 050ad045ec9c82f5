"""Command line interface for MusIQ."""
