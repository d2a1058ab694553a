"""Graph Tutorial Test Suite

Test organization:
- unit/: Unit tests for individual modules
  - graph/: Week window, time zones, models, OAuth, Graph provider
  - web/: Flash messages and HTML pages
- integration/: The FastAPI app through TestClient with a fake provider

Running tests:
    # All tests
    pytest

    # Specific module
    pytest tests/unit/graph/test_week.py
"""
