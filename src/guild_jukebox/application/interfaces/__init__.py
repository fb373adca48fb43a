"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters. These are the "ports" in
hexagonal architecture.
"""

from guild_jukebox.application.interfaces.catalog import Catalog
from guild_jukebox.application.interfaces.stream_provider import AudioStream, StreamProvider
from guild_jukebox.application.interfaces.voice_transport import VoiceTransport

__all__ = [
    "AudioStream",
    "Catalog",
    "StreamProvider",
    "VoiceTransport",
]
