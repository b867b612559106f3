"""Word retrieval and statistics services."""
