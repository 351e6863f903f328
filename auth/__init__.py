"""auth/ -- Authentication core of the SSO system.

passwords.py hashes and verifies credentials, tokens.py signs access tokens
per tenant app, service.py orchestrates login / registration / admin check
over the data-access roles declared in interfaces.py.

Layer rule: auth/ owns no storage and no transport. It may import
storage.errors (the sentinel contract) and core/, never storage adapters
or main.py.
"""
