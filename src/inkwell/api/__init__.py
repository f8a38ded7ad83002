"""
HTTP application for Inkwell
"""
