"""KnowledgeHub client: session, document sync, search and Q&A."""

__version__ = "0.1.0"
