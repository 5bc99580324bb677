# Sessions are not stored in Supabase.
# Starlette's SessionMiddleware keeps them in a signed cookie (itsdangerous).

"""
Session shape:

- user: str (optional) - id of the logged-in user; absent when logged out
"""
