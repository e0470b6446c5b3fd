"""Playwright-facing collaborators: DOM adapter and session bootstrap."""
