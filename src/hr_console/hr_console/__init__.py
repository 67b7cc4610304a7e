"""HR Console package.

This package is organized by feature modules (location, punch, attendance,
tasks, queries) over an httpx backend client, with a thin Flask controller
layer on top.
"""
