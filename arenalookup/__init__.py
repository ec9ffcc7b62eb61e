"""In-memory card lookup server speaking a line-oriented text protocol."""
