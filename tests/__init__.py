"""Test suite for formbinder.

This package contains tests for:
- Error store and payload normalization
- Form field state (fill, reset, reserved names, flags)
- Submission coordinator lifecycle, concurrency policy and events
- Default httpx transport, routes and configuration
- Integration scenarios through the Form facade
"""
