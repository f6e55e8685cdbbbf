"""mockdeck — operator console for a mock HTTP/GraphQL server."""

__version__ = "0.1.0"
