"""
Integration tests for the payment gateway adapters.
"""
