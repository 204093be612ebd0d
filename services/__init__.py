"""
Services module for MediTrack Backend.

Contains business logic, including the adherence calculator.
"""
