"""
Serving: FastAPI surface over the background worker.

Run with ``uvicorn pdf_chat.serving.app:create_app --factory``.
"""
