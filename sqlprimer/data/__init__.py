"""Loading spreadsheets and generating sample data."""
