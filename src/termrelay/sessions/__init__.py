"""Session store module for termrelay.

Holds one transcript per client session id, seeded with the terminal
preamble on first use.
"""

from termrelay.sessions.store import SessionStore, build_preamble

__all__ = ["SessionStore", "build_preamble"]
