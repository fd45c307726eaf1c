"""Test suite for the relauthz authorization layer.

Test structure:
- unit/: Adapter and domain tests against an in-memory SpiceDB stand-in
- integration/: Tests against a real SpiceDB (skipped without SPICEDB_ENDPOINT)
"""
