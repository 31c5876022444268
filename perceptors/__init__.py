"""Perceptor maintenance application.

Models, validation, lifecycle services, views and route registrations
for the back-office screens that maintain benefit recipients
(perceptors), currently the hospital category.
"""
