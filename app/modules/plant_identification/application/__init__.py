"""Application layer (CQRS commands, queries and handlers) for plant identification."""
