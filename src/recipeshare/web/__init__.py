"""Server-rendered pages and form actions."""
