"""
URL configuration for the contact relay project.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""
from django.urls import path, include

urlpatterns = [
    path('api/', include('contact.urls')),  # Public contact form relay (no auth)
]
