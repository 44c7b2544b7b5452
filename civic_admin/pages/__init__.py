"""Server-rendered HTML pages."""

from civic_admin.pages.root import render_root_page

__all__ = ["render_root_page"]
