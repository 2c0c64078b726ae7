"""HRIS payroll package.

Organized by feature modules (employees, attendance, payroll, overtime, leave, ...)
with a thin Flask JSON controller layer over service/repository layers.
"""
