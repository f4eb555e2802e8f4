"""
Permission management feature module.

Implements role-based access control with global roles, permission flags,
and company-scoped enforcement.
"""
