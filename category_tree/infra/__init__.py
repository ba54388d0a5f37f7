"""Infrastructure: logging and database session wiring."""
