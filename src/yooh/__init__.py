"""Yooh school attendance package.

Organized by feature modules (zones, classes, attendance, sync, ...) with a
thin Flask controller layer over service/repository layers.
"""
