"""Shared test fixtures package.

Provides instrumented Lifecycle implementations and helpers used across
the unit tests.
"""
