"""
filestore: HTTP file store over a single storage directory
Built with FastAPI + Uvicorn + aiofiles
"""

__version__ = "1.0.0"
__author__ = "filestore"
__description__ = "Network-accessible file store"
