"""Reply merging and tracking reconciliation."""
