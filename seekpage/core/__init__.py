"""Core building blocks shared by every feature module."""
