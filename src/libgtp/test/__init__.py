"""Helpers for testing libgtp and code built on top of it."""
