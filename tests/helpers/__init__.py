"""Test helpers for imgcat."""
