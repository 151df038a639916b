"""Attendance Tracker package.

Feature modules (attendance, employees, leaves, reports) each carry their own
model / repository / service / controller layers. Identity and role claims
come from an external auth provider through the Flask session.
"""
