"""
Core Package
Session authority, cart store and the services built on them
"""
