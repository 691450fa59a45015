"""
Command line tools for flowmail.
"""
