"""
Resume Studio generation API - Flask app exposing the resume and cover
letter generation endpoints and PDF export.
"""
