"""PeerConnect student community backend."""
