"""
Contacts application.

Each user owns one private contact list, created lazily on first use, whose
entries point at other users together with a custom display name.

Usage:
    from contacts.services import ContactService
"""
