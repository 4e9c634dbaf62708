"""Conversation core: message model, sessions, providers and orchestration."""
