"""Core building blocks: database layer, settings and validators."""
