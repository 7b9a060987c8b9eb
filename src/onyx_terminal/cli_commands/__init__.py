"""
CLI command modules for ONYX Terminal.
"""
