"""JeevesBot REST API (FastAPI)"""
