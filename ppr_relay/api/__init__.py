"""
API Module

HTTP routers for health checks and form submission.
"""
