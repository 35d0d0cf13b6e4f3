"""Diagnostic services: reporter, checks and the check sequencer."""
