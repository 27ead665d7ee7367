"""Core wiring: configuration, event bus, timers, search and the dashboard controller."""
