"""Salon management backend: customers, employees, services, appointments and tally records."""

__version__ = "1.0.0"
