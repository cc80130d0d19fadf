"""Infrastructure layer — network, cryptography, and filesystem.

Every raw third-party exception (httpx, PyNaCl, pydantic, ``OSError``)
must be caught here and re-raised as a
:class:`~holepuncher.exceptions.HolepuncherError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output.
"""

from holepuncher.infra.codec import BoxCodec
from holepuncher.infra.session_store import clear_session, restore_session, save_session
from holepuncher.infra.transport import HolepuncherClient

__all__: list[str] = [
    "BoxCodec",
    "HolepuncherClient",
    "clear_session",
    "restore_session",
    "save_session",
]
