"""Security helpers and request decorators."""
