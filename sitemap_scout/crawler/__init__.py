# sitemap_scout/crawler/__init__.py
