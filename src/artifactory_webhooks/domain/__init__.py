"""Domain enums, wire models and configuration shape."""
