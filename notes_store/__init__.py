"""Authorization-aware data access for the notes manager."""
