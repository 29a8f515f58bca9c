"""Configuration, logging, errors and constants."""
