"""
Token issuing/verification and password hashing used by the identity issuer
and the authorization guard.
"""
