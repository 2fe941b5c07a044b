"""Expectation harness for checking chunker output against JSON fixtures."""
