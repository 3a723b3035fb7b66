"""Application layer - DTOs, service wiring, and seed data."""
