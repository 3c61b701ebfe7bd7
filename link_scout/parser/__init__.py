# File: link_scout/parser/__init__.py
"""link_scout.parser: HTML snapshot and sitemap parsing."""
