"""
medreport - structured medical report generation
"""

__version__ = "1.0.0"
__description__ = "Resilient structured generation of medical reports with Gemini"
