"""
Explorer Search

This package implements the search bar of a blockchain explorer: free-form user input is
classified, resolved to an on-chain identity and turned into a navigation to the canonical
explorer page.

Key Components:
- resolve: Input classification and ENS identity resolution
- search: Navigation and the per-user search session state machine
- app: HTTP API, configuration and process entry points

Search Flow:
1. Classification:
   - Transaction hashes (0x + 64 hex) and addresses (0x + 40 hex) are recognised locally
   - Anything else non-empty is treated as an ENS name

2. Resolution:
   - Addresses are reverse-resolved to a primary ENS name and its avatar
   - ENS names are forward-resolved to an address; failure marks the input invalid

3. Navigation:
   - The canonical path (tx/ or address/) is computed below the explorer base path
   - Navigation is skipped when the router is already on that path

Overlapping searches are ordered by a per-session cycle number: stale results are discarded
and the previous cycle's lookups are cancelled when a new search begins.
"""
