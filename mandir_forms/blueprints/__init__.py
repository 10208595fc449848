# mandir_forms/blueprints
# health: liveness/readiness probes (/api)
