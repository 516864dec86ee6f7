"""
Contracts (data models).

Request/response shapes and the error taxonomy for the remittance rail.
Both the mock and the real HTTP clients use these, so flows rely on stable
models instead of ad-hoc dicts.
"""
