"""
Contact Relay App

Handles the public "contact us" form of the website:
- CORS preflight with a static origin allow-list
- Honeypot spam trap
- Field normalization and validation
- Relay of the submission as a plain-text email
"""
