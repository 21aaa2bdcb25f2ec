"""Authentication and authorization.

Learn: Users sign up or log in with email/password and receive a stateless
JWT. Every protected request resolves that token back to a Subject
(Student or Teacher). The policy module then decides, per task, what the
subject may read and what it may change.
"""
