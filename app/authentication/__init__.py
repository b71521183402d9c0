"""
Authentication application.

This app is the identity directory for the messaging backend: user accounts
keyed by mobile number, password login, JWT issuance and presence status.

Key components:
    - User model: Custom mobile-based user authentication
    - IdentityService: Lookups used by the contact and chat apps
    - AuthService: Registration, login, profile and status updates

Usage:
    from authentication.models import User
    from authentication.services import AuthService, IdentityService
"""
