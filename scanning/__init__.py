"""
Scanning module - AI content classification of uploaded files.

Independent of the license lifecycle; shares only the HTTP layer.
"""
