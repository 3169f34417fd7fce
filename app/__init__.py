"""Configuration and version helpers for the MIDI parser tools."""
