"""
RecordHub web layer.

Thin FastAPI routes over the recordhub managers. Build the app with
web.main.create_app(); main.py serves it with uvicorn.
"""
