"""
TokenPulse - Frontend and analysis client
"""
