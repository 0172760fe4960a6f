"""
Clinical classification enums stored alongside check-ins and analyses.
"""

from enum import Enum


class Specialty(str, Enum):
    """Medical department an analysis routes the patient to."""
    GENERAL_MEDICINE = "general_medicine"
    CARDIOLOGY = "cardiology"
    NEUROLOGY = "neurology"
    DERMATOLOGY = "dermatology"
    ORTHOPEDICS = "orthopedics"
    PEDIATRICS = "pediatrics"
    PSYCHIATRY = "psychiatry"
    OPHTHALMOLOGY = "ophthalmology"
    ENT = "ent"
    PULMONOLOGY = "pulmonology"


class UrgencyTier(str, Enum):
    """Patient-reported urgency of a visit."""
    REGULAR = "regular"
    SOON = "soon"
    URGENT = "urgent"


class Severity(str, Enum):
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"


class AppointmentType(str, Enum):
    """Appointment types offered on the registration form."""
    GENERAL = "general"            # General checkup
    FOLLOW_UP = "follow_up"
    SPECIALIST = "specialist"
    EMERGENCY = "emergency"        # Urgent care
    OTHER = "other"
