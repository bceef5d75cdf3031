"""Core module - application wiring."""
