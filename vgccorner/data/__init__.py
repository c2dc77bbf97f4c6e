"""Battle data: output schemas and log parsers."""
