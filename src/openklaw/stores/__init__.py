"""Preference, statistics and runtime state stores."""
