"""
Domain helpers for the exam-prep backend
"""
