"""
Ingestion: document extraction, chunking, and embedding.

Converts an uploaded document (PDF or plain text) into embedded
segments ready to be added to the vector index.
"""
