"""Core interfaces shared across syncdoc."""
