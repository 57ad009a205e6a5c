"""Core utilities: exceptions, security and logging."""
