"""storage/ -- Data-access collaborators for the SSO auth core.

errors.py defines the sentinel exceptions every adapter must raise; the
auth service classifies failures against them. sqlite.py is the reference
adapter (async SQLAlchemy Core).

Layer rule: storage/ may import auth.models (the domain shapes it returns)
but never auth.service. The service depends on storage.errors only.
"""
