"""
Settings for LicenseVerificationService.

base.py holds everything shared; dev, test and prod override it and
are selected through DJANGO_SETTINGS_MODULE.
"""
