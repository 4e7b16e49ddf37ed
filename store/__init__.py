"""Local job persistence."""
