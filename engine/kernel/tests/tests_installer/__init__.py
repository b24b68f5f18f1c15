"""
Section Installer Test Suite

1. test_schema_merge.py - Append-if-absent settings schema merge
2. test_theme_resolver.py - Explicit vs main theme selection
3. test_installer.py - Template/companion deployment and outcomes
4. test_installer_concurrency.py - Per-theme serialization of schema writes
"""
