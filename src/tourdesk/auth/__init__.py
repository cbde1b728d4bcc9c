"""Staff authentication for back-office routes."""
