"""
HTTP API: license verification and admin provisioning endpoints.
"""
