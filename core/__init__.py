"""
Shared building blocks of the license verification service.

Value objects, domain exceptions and events, the in-process event bus,
request middleware, metrics and the lockout notification task.
"""
