"""
API module for Sentinel.

Provides REST API routes for:
- Payee risk evaluation
- UPI QR payload scanning
"""
