"""
Data Package
Models, local persistence and adapters for the hosted services
"""
