"""
Configuration Package
Static settings and the remote configuration loader
"""
