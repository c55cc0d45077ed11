"""Configuration, session state and completion-service plumbing."""
