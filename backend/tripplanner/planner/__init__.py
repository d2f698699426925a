"""
Client-side planning logic: the wizard, form validation, submission and the
list helpers used by the weather, transport and events pages.
"""
