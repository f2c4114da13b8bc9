"""
TokenPulse - REST API
"""
