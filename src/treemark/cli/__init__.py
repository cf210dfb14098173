"""Command-line host for treemark."""
