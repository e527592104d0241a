"""Infrastructure adapters: Firebase, email, persistence and encryption."""
