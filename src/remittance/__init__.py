"""
Remittance transaction pipeline for the DRAP payment rail.
"""
