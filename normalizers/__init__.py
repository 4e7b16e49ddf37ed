"""Header and order key normalization."""
