"""Host adapters for the tile editor."""
