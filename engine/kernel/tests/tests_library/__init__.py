"""
Section Library Test Suite

1. test_asset_reader.py - Ordered multi-root resolution
2. test_preview.py - Preview search order and placeholder rendering
"""
