"""Lecture attendance package.

Organized by feature modules (lectures, enrollments, attendance) with a thin
Flask controller layer over service/repository layers.
"""
