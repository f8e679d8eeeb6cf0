"""Core — models, config, services and use cases. No UI concerns."""
