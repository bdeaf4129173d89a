"""Sign-up, sign-in and password flows backed by Supabase Auth."""
