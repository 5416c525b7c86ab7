"""Crypto investment chatbot: category market analysis, risk scoring and wallet actions."""

__version__ = "0.1.0"
