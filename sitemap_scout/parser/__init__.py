# sitemap_scout/parser/__init__.py
