"""
Client library instrumentations shipped with shimtrace.
"""
