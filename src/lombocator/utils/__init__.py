"""
Utils Package.
"""
