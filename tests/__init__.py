#!/usr/bin/env python3
"""
Test suite for MoltJob.

    # Run all tests
    python -m pytest tests/ -v

    # Only tests that do not touch a database
    python -m pytest tests/ -v -m "not db"

Database-backed tests use in-memory SQLite, so no external services are
needed. Redis and the orchestrator are always mocked.
"""
