"""Branch Attendance package.

Geofenced check-in/check-out for multi-branch businesses plus the payroll
metrics derived from closed attendance sessions. Organized by feature modules
(branches, employees, attendance, payroll, ...) with a thin Flask controller
layer over service/repository layers.
"""
