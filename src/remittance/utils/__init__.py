"""
Utility modules for the remittance rail
"""
from .config_loader import load_credentials, load_remittance_config, RemittanceConfig

__all__ = [
    'load_credentials',
    'load_remittance_config',
    'RemittanceConfig',
]
