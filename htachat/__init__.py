"""htachat - conversational client with persistent local chat sessions."""

__version__ = "0.3.0"
