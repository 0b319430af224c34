"""Reconciliation, manifest and migration numbering engine."""
