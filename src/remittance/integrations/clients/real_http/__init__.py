"""
Real HTTP rail clients.

One component per pipeline stage (auth, quotes, transactions), the master
data lookups, and DrapRailClient, which bundles them behind the
RemittanceRail interface. All return data shaped by remittance.integrations.contracts.
"""
