"""Business logic for the auth API."""
