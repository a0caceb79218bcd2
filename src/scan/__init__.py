"""Source and store file scanning."""
