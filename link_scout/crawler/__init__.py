# File: link_scout/crawler/__init__.py
"""link_scout.crawler: snapshot provider, link extraction and the bounded BFS frontier."""
