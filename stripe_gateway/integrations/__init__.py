"""
Integration modules

Contains adapters and clients for external payment providers.
"""
