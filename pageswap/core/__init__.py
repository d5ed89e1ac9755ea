"""Session state machine, configuration and shared types."""
