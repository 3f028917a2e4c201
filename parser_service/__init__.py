"""
Parser Service - Dedicated service for resume text extraction.

Accepts uploaded PDF resumes and returns their plain text. Separated from
the generation API so that PDF parsing load never competes with
generation requests.
"""

__version__ = "0.3.0"
