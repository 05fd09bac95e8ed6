"""Infrastructure layer for plant identification: provider clients and persistence."""
