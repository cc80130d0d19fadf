"""holepuncher — tunnel provisioning client for the holepuncher server.

Talks to the server over an encrypted request/reply channel and keeps a
small session record of the tunnel it owns.
"""

from holepuncher.version import __version__

__all__: list[str] = ["__version__"]
