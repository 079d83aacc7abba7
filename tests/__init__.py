"""Test suite for geo_semantic_cache."""
