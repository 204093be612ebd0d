"""
Pydantic schemas for MediTrack Backend.

Contains all API request/response schemas organized by module.
"""

from .auth import *
from .medication import *
from .dose_event import *
from .report import *
from .responses import *
