"""
VTE Manager
===========

Point-of-care Caprini VTE risk assessment with prophylaxis protocol
recommendation, FJS-12 outcome tracking and pain banding.
"""

__version__ = "1.0.0"
