"""Clientes das APIs expostas: em processo (local) e via HTTP (remoto)."""

from __future__ import annotations

from app.clients.local import LocalClient
from app.clients.remote import RemoteClient, RemoteClientConfig

__all__ = ["LocalClient", "RemoteClient", "RemoteClientConfig"]
