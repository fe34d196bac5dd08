"""HTTP surface for the SafeHer assistant."""
