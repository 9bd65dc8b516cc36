"""
Clinica Appointment API

A FastAPI-based booking system for a medical clinic, with JWT
authentication, patient appointments, and admin user/role management.
"""

__version__ = "1.0.0"
