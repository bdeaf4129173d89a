"""
Recipeshare - Recipe sharing on FastAPI and Supabase.

Packages:
- db: Supabase access (recipes, likes, followings, storage)
- auth: Sign-up, sign-in and password flows
- forms: Recipe authoring form state
- web: Server-rendered pages and form actions
"""

__version__ = "1.0.0"
