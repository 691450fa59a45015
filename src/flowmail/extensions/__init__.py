"""
Built-in plugins shipped with flowmail.
"""
