"""
Care Transport Management Service.

Django project for welfare/care transportation: drivers record route and rider
trips with odometer readings, administrators manage master data and reports.
"""

__version__ = '0.1.0'
