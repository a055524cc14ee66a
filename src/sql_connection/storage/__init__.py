"""Storage layer: concrete database adapters."""
