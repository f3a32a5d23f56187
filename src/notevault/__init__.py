"""
NoteVault - multi-user notes service

Accounts keep private notes, share them read-only with other accounts and
search across everything they can read.

Version: 1.0.0
"""

__version__ = "1.0.0"
