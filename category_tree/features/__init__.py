"""Feature packages of the category tree."""
