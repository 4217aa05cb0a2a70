"""
Domain Layer

Pure business rules: identity, quotas, file ledger and signed access links.
"""
