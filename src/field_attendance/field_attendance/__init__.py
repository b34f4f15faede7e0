"""Field Attendance package.

This package is organized by feature modules (users, employees, attendance,
locations, ...) with a thin Flask controller layer over service/repository layers.
"""
