"""
Identity Resolution

This package classifies explorer search input and resolves it to an on-chain identity.

Key Components:
- classify.py: Pattern based classification of raw input
- errors.py: Resolution failure taxonomy
- names.py: ENS name service client (reverse, forward and avatar lookups)
- identity.py: Identity composition on top of a name service
- __main__.py: CLI interface for resolution

Resolution Types:
1. Reverse Resolution
   - Address to primary ENS name, followed by an avatar lookup for that name

2. Forward Resolution
   - ENS name to address, followed by an avatar lookup for the name

Transaction hashes carry no identity and are never sent to the name service.
"""
