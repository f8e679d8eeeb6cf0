"""Services — channel-independent operations used by use cases and the CLI."""
