"""Infrastructure layer: cache, backend clients, transformers and providers."""
