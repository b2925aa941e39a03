"""
Services module - one service class per MongoDB collection.
"""
