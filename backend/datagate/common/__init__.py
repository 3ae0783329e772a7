"""
Common Utilities Module
"""
