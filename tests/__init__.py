"""
Test Suite for fintrack

Test Structure:
- fixtures/: Synthetic CSV exports
- unit/: Unit tests mirroring src/ package structure
- integration/: CLI and end-to-end workflow tests

Test Data:
All test data uses synthetic financial information.
"""
