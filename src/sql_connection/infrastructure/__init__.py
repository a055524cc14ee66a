"""Infrastructure: database interfaces and observability."""
