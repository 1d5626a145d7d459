"""auth/ -- Credential rules, password hashing, users, and session authorization.

Layer rule: auth/ imports only core/, stdlib, and third-party libraries.
It does NOT import from api/ or journal/.
api/ imports from auth/, not the other way around.
"""
