"""Test suite for the formproxy validation engine.

This package contains tests for:
- Form model and payload checks
- Condition evaluation and status resolution
- Field validation
- Registry and events
- Runtime scenarios (validation, rejection, dispatch)
"""
