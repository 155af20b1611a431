"""
Page Search Package.

Stores books and their extracted pages in SQLite and runs case-insensitive
whole-word phrase searches across selected books of a subject, with a
Streamlit web interface on top.
"""

__version__ = "1.0.0"
