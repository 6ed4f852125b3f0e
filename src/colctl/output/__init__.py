"""Output layer — Rich console and LineResult renderers."""
