"""Offline batch tools that populate and enrich the words table."""
