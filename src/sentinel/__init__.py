"""
Sentinel - UPI Fraud Awareness Risk Core

Scores UPI payee identifiers before a payment is made:
- Matches identifiers against blacklist, trusted merchants and risky patterns
- Compares the payment with the user's own scan history
- Classifies the result and recommends what to do next
"""

__version__ = "0.1.0"
