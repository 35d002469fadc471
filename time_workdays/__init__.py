"""
Time & Workdays: current time per time zone and official workdays per month.
"""

__version__ = "1.1.0"
