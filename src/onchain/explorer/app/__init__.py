"""
Explorer Search Application Layer

This package exposes the search pipeline over HTTP using the aiohttp framework.

Key Components:
- cli.py: Entry point for running the application
- server.py: Web server configuration and middleware setup
- config.py: Configuration management using Pydantic settings
- handlers/: Request handlers for the search and resolve endpoints

It provides the following endpoints:
- /api/search: Run one search cycle and report the navigation target
- /api/resolve: Resolve one or more subjects to identities
- /internal/alive: Liveness check
"""
