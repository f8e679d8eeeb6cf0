"""Persistence — on-disk build folder state."""
