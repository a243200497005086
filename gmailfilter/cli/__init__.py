"""gmailfilter CLI - drive the provider lifecycle from JSON files."""
