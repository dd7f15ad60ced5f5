"""
Contact Relay URL Configuration
"""
from django.urls import path
from .views import ContactFormSubmitView

app_name = 'contact'

# Public URLs (no auth required); the form posts with and without a trailing slash
urlpatterns = [
    path('contact', ContactFormSubmitView.as_view(), name='submit'),
    path('contact/', ContactFormSubmitView.as_view(), name='submit-slash'),
]
