"""Authentication: credential hashing, session tokens, and the request guard.

Learn: Sessions are stateless. Login issues a signed JWT that lives
7 days; nothing is stored server-side. Every protected request
carries the token in the ``x-auth-token`` header and the guard in
dependencies.py turns it back into a caller identity.
"""
