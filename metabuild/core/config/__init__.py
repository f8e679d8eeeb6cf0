"""Configuration — workspace config and target catalog loading."""
