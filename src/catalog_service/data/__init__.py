"""Product record model and CSV import."""
