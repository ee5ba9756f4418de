"""Test suite for formstate.

This package contains tests for:
- Dual-state store (commit, seed, removal, referential stability)
- Error, loading and mounting stores
- Required registry (defaults, live evaluation, aggregates)
- FormEvent serialization, envelope validation and action listeners
- Coordinator integration scenarios (create mode, edit mode, submit)
"""
