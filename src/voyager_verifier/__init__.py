"""Client for submitting Starknet class verifications to Voyager."""

__version__ = "0.1.0"
