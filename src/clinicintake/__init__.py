"""
Clinic-Intake: patient check-in service

Registers new patients, verifies returning ones, runs symptom analysis
and stores printable check-in reports. Speech-to-text can fill form fields.
"""

__version__ = "0.1.0"
__author__ = "Clinic-Intake Team"
__description__ = "Patient intake and check-in service"
