"""Test package for draftboard."""
