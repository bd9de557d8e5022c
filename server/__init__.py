"""
FastAPI backend server for the PDF to JPG converter.

Provides REST API endpoints for:
- Account signup and login (bearer tokens)
- PDF upload and conversion
- Per-user conversion history
"""

__version__ = "0.1.0"
