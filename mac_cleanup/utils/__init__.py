"""Helpers for mac-cleanup."""
