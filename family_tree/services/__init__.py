"""
Service layer: business operations on top of the repositories
"""
