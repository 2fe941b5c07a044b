"""Configuration, logging and data models."""
