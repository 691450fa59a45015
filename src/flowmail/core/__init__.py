"""
Core of flowmail: host data model, configuration, execution support and
plugin registration.
"""
