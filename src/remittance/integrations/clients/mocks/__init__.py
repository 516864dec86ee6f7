"""
Mock rail clients.

No network calls; deterministic responses for development and tests.
Swap for remittance.integrations.clients.real_http.drap.DrapRailClient by
setting INTEGRATIONS_MODE=real.
"""
