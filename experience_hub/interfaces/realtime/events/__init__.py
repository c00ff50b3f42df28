"""Socket event handlers grouped by concern."""
