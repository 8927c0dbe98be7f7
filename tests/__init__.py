"""
Test suite for the manual site backend.

- test_blocks / test_codec / test_renderer / test_editor / test_analytics:
  pure modules, no database
- test_store / test_tracking: ContentStore and event capture
- test_public_api / test_admin_api: HTTP endpoints
"""
