"""Infrastructure layer: adapters and providers."""
