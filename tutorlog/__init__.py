"""Student Interaction Log — logs student / AI tutor interactions to CSV or a database."""
