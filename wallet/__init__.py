"""
Wallet - Source Package

Client-side data synchronization core for a personal-finance ledger.
Holds the local view of a user's transactions and balance summary and keeps
it consistent with the remote transaction service.

DESIGN PRINCIPLES:
1. The server is authoritative; local state is a cache of its answers
2. Mutations show up locally at once and roll back loudly on failure
3. Every failure is both recorded and raised
4. The remote service is swappable behind an interface
"""

__version__ = "1.0.0"
__author__ = "Wallet Team"
