"""Tourdesk back office: media delivery service.

Stores customer photos and identity scans on the remote hosting account
through HTTP upload with an FTP fallback.
"""

__version__ = "0.1.0"
