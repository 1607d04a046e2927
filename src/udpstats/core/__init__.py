"""Core domain: payload encoding, facade and configuration."""
