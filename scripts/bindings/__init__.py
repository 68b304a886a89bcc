"""
Library-specific binding configurations
"""
