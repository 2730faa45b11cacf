"""
Folio Backend — Services Layer
================================

Service Inventory:
    - AuthService:     registration, login, token resolution, password change
    - ProjectService:  project CRUD with ownership rules
    - ContactService:  contact submissions, notifications, status tracking
    - FileService:     image upload validation and storage
    - MailService (abstract) with Console and SMTP implementations

Services take an AsyncSession per call and hold no request state, so one
instance per application serves all concurrent requests.
"""
