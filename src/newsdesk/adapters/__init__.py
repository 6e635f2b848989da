"""Adapters for external systems: HTTP, feeds, sites, Gemini, rendering."""
