"""
Core module - configuration, auth, logging and domain errors.
"""
