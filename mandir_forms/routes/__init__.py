# mandir_forms/routes
# forms: public form API (/api/v1/forms)
# dev:   development-only helpers (/api/dev)
