"""Command line interface for committee_access."""
