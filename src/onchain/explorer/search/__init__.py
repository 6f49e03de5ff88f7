"""
Search Session

This package turns classified input into navigation and tracks one user's search state.

Key Components:
- navigator.py: Canonical explorer paths, routers and the no-op navigation guard
- session.py: The search cycle state machine exposed to the presentation layer
"""
