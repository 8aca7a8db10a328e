"""Integration tests for the slide tracker event plumbing."""
