"""Campus Event Portal package.

Organized by feature modules (users, events, attendance) with a thin Flask
controller layer over service/repository layers.
"""
