#!/usr/bin/env python3
"""Default configuration values for peerclip.

These values describe the Wi-Fi Direct segment the two endpoints share.
Every one of them can be overridden from the command line or the
matching PEERCLIP_* environment variable.
"""

# Address of this machine on the Wi-Fi Direct segment; the HTTP server binds here.
DEFAULT_HOST: str = "192.168.137.1"

# TCP port for both the local server and the peer.
DEFAULT_PORT: int = 5000

# Callers whose IPv4 address does not start with this prefix receive 403.
DEFAULT_ALLOWED_PREFIX: str = "192.168.137."

# Base URL of the peer; pushes go to <peer>/clipboard.
DEFAULT_PEER_URL: str = "http://192.168.137.2:5000"

# Seconds between two samples of the local clipboard.
DEFAULT_POLL_INTERVAL: float = 1.0

# Upper bound in seconds for one push to the peer. Must not exceed the
# poll interval so that a slow peer never stalls the poller for more
# than one tick.
DEFAULT_PUSH_TIMEOUT: float = 1.0

# Clipboard backend: "auto", "x11" or "pyperclip".
DEFAULT_BACKEND: str = "auto"

# Characters of clipboard text shown in log lines.
PREVIEW_LENGTH: int = 60
