"""Authentication.

Learn: Tokens are issued by the NextAuth.js frontend and only verified
here. A verified token resolves to an Identity, which write routes use
as the owner of whatever they persist.
"""
